"""
Tests for the command line interface.
"""

import pytest
from click.testing import CliRunner

from rescuedogs_mcp.cli.main import cli
from rescuedogs_mcp.tools.service import RescueDogsService
from tests.fakes import FakeResponse, ok


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def use_service(monkeypatch, service):
    """Make every command use the service wired to the fake session."""
    monkeypatch.setattr(
        RescueDogsService,
        "from_settings",
        classmethod(lambda cls, settings: service),
    )
    return service


class TestCli:
    """Tests for the CLI commands."""

    def test_version(self, runner):
        """Test the version option."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "rescuedogs-mcp" in result.output

    def test_guide(self, runner):
        """Test printing a guide with a country section."""
        result = runner.invoke(cli, ["guide", "fees", "-c", "UK"])

        assert result.exit_code == 0
        assert "UK-Specific Information" in result.output

    def test_guide_unknown_topic(self, runner):
        """Test that an unknown topic is a usage error."""
        result = runner.invoke(cli, ["guide", "grooming"])

        assert result.exit_code == 2

    def test_search_json(self, runner, use_service, session, sample_dog_payload):
        """Test a search printed as JSON."""
        session.add("GET", "/api/animals", ok([sample_dog_payload]))

        result = runner.invoke(cli, ["search", "--size", "Large", "-c", "GB", "--json"])

        assert result.exit_code == 0
        assert '"count": 1' in result.output
        call = session.calls_to("/api/animals")[0]
        assert ("available_to_country", "UK") in call["params"]

    def test_search_limit_out_of_range(self, runner, use_service, session):
        """Test that a bad limit is rejected before any request."""
        result = runner.invoke(cli, ["search", "-n", "500"])

        assert result.exit_code == 2
        assert session.calls == []

    def test_dog_not_found(self, runner, use_service, session):
        """Test that a failed lookup exits non-zero."""
        session.add("GET", "/api/animals/ghost-1", FakeResponse(404, {"detail": "Animal not found"}))

        result = runner.invoke(cli, ["dog", "ghost-1", "--no-image"])

        assert result.exit_code == 1

    def test_match(self, runner, use_service, session, sample_dog_payload):
        """Test the preference matching command."""
        session.add("GET", "/api/animals", ok([sample_dog_payload]))

        result = runner.invoke(
            cli,
            ["match", "--living", "rural", "--activity", "active", "--experience", "some", "--no-cats", "--json"],
        )

        assert result.exit_code == 0
        params = dict(session.calls_to("/api/animals")[0]["params"])
        assert params["home_type"] == "house_required"
        assert params["good_with_cats"] == "false"

    def test_filters(self, runner, use_service, session, sample_filter_counts_payload):
        """Test the filter counts command."""
        session.add("GET", "/api/animals/meta/filter_counts", ok(sample_filter_counts_payload))

        result = runner.invoke(cli, ["filters", "--age", "puppy"])

        assert result.exit_code == 0
        assert ("age_category", "Puppy") in session.calls[0]["params"]

    def test_bad_retry_delay(self, runner):
        """Test that an invalid retry delay in the environment exits early."""
        result = runner.invoke(cli, ["guide"], env={"RESCUEDOGS_RETRY_DELAY": "soon"})

        assert result.exit_code == 2
