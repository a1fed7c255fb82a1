"""
Tests for package-level metadata.
"""

import verb_trainer


class TestPackageMetadata:
    """Tests for __version__ / __copyright__."""

    def test_version_when_imported_then_non_empty(self):
        assert verb_trainer.__version__

    def test_copyright_when_imported_then_names_license(self):
        assert "MIT License" in verb_trainer.__copyright__
