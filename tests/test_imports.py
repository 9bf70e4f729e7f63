"""Tests for import paths and re-exports."""

from __future__ import annotations


class TestPackageImportable:
    """Package is importable and exports expected symbols."""

    def test_import_package(self):
        import img4llm
        assert img4llm is not None

    def test_entry_points_exported(self):
        import img4llm

        expected = {
            "extract_metadata",
            "determine_strategy",
            "analyze_image",
            "optimize_for_llm",
            "analyze_with_vlm",
            "count_distinct_colors",
            "is_acceptable_svg",
            "ImageOptimizer",
            "OptimizerConfig",
            "OllamaVLM",
        }
        assert expected.issubset(set(img4llm.__all__)), (
            f"Missing exports: {expected - set(img4llm.__all__)}"
        )

    def test_all_names_resolve(self):
        import img4llm

        for name in img4llm.__all__:
            assert hasattr(img4llm, name), name

    def test_backends_package(self):
        from img4llm.backends import OllamaVLM
        assert OllamaVLM is not None
