"""Tests for application settings."""

from py_clickboard.config import Settings


class TestSettings:
    """Test settings parsing and derived values."""

    def test_debug_forces_debug_logging(self):
        """Test that debug mode overrides the configured log level."""
        assert Settings(debug=True, log_level="WARNING").effective_log_level == "DEBUG"
        assert Settings(debug=False, log_level="WARNING").effective_log_level == "WARNING"

    def test_debug_from_environment(self, monkeypatch):
        """Test that the debug flag is read with the project prefix."""
        monkeypatch.setenv("CLICKBOARD_DEBUG", "true")
        assert Settings().debug is True

    def test_piece_count_options(self):
        """Test parsing the offered piece counts."""
        settings = Settings(supported_piece_counts="12, 20,,50")
        assert settings.piece_count_options == [12, 20, 50]

    def test_origins(self):
        """Test parsing CORS origins."""
        settings = Settings(allowed_origins="http://a.test, http://b.test")
        assert settings.origins == ["http://a.test", "http://b.test"]
