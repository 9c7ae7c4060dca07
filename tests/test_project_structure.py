"""Test that project structure is correct and modules can be imported."""

import core.config
import core.exceptions
import core.models
import core.parse_gemfile
import core.rebuild
import core.resolve_ruby
import core.update
from core.models import GemDeclaration, ManifestLine, UpdateReport


def test_core_modules_importable():
    """Ensure core modules can be imported."""
    assert hasattr(core.models, "GemDeclaration")
    assert hasattr(core.models, "ReleaseRecord")
    assert hasattr(core.parse_gemfile, "parse_gemfile")
    assert hasattr(core.rebuild, "build_gem_line")
    assert hasattr(core.resolve_ruby, "determine_target_version")
    assert hasattr(core.update, "GemfileUpdater")
    assert issubclass(core.exceptions.RegistryError, core.exceptions.GemBumpError)


def test_model_creation():
    """Test that basic models can be instantiated."""
    declaration = GemDeclaration(name="rails", current_version="7.0.4")
    assert declaration.name == "rails"
    assert declaration.has_alt_source is False

    line = ManifestLine(raw='gem "rails"', indent="", line_number=1, declaration=declaration)
    assert line.is_declaration

    report = UpdateReport(filename="Gemfile", lines=["a", "b"])
    assert report.content == "a\nb"
    assert report.changes == []
    assert not report.has_changes
