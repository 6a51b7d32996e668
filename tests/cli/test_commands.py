"""Tests for the sdui CLI commands."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _run(*args: str, extra_env: dict[str, str] | None = None) -> subprocess.CompletedProcess:
    env = {k: v for k, v in os.environ.items() if not k.startswith("SDUI_")}
    env.update(extra_env or {})
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
        env=env,
        timeout=60,
    )


@pytest.mark.integration
class TestGenerateCommand:
    """Tests for python . generate."""

    def test_generate_writes_json(self, tmp_path):
        """generate writes the encoded sample."""
        out = tmp_path / "card.json"
        result = _run("generate", "enhanced-card", str(out))
        assert result.returncode == 0, result.stderr
        data = json.loads(out.read_text())
        assert data["type"] == "Card"
        assert data["id"] == "enhanced_card"

    def test_unknown_type_fails(self, tmp_path):
        """Unknown component types exit non-zero."""
        result = _run("generate", "carousel", str(tmp_path / "x.json"))
        assert result.returncode == 1
        assert "Unknown component type" in result.stderr


@pytest.mark.integration
class TestSchemaCommand:
    """Tests for python . schema."""

    @pytest.mark.parametrize("strategy", ["metadata", "explicit"])
    def test_schema_written(self, tmp_path, strategy):
        """Both strategies write a draft-07 document."""
        out = tmp_path / "schema.json"
        result = _run("schema", str(out), "--strategy", strategy)
        assert result.returncode == 0, result.stderr
        schema = json.loads(out.read_text())
        assert schema["$schema"] == "http://json-schema.org/draft-07/schema#"
        assert "CardToken" in schema["definitions"]


@pytest.mark.integration
class TestRenderCommand:
    """Tests for python . render."""

    def test_render_sample(self, tmp_path):
        """render writes the tree followed by the JSON."""
        source = tmp_path / "card.json"
        out = tmp_path / "card.txt"
        assert _run("generate", "profile-card", str(source)).returncode == 0

        result = _run("render", str(source), str(out))
        assert result.returncode == 0, result.stderr
        text = out.read_text()
        assert text.startswith("profile_card [Card, v1, interactive]")
        assert '"id": "avatar_image"' in text

    def test_render_invalid_document(self, tmp_path):
        """Schema violations exit non-zero with their paths."""
        source = tmp_path / "bad.json"
        source.write_text(json.dumps({"type": "Text", "id": "t", "version": 1}))
        result = _run("render", str(source), str(tmp_path / "out.txt"))
        assert result.returncode == 1
        assert "'text' is a required property" in result.stderr

    def test_render_malformed_json(self, tmp_path):
        """Malformed JSON exits non-zero."""
        source = tmp_path / "broken.json"
        source.write_text("{not json")
        result = _run("render", str(source), str(tmp_path / "out.txt"))
        assert result.returncode == 1
        assert "Malformed JSON" in result.stderr


@pytest.mark.integration
class TestMigrateCommand:
    """Tests for python . migrate."""

    def test_migrate_upgrades(self, tmp_path):
        """migrate rewrites versions and applies field migrations."""
        source = tmp_path / "text.json"
        out = tmp_path / "text.v2.json"
        source.write_text(
            json.dumps({"type": "Text", "id": "t", "version": 1, "text": "x", "style": "BodySmall"})
        )
        result = _run("migrate", str(source), str(out), "2")
        assert result.returncode == 0, result.stderr
        migrated = json.loads(out.read_text())
        assert migrated["version"] == 2
        assert migrated["style"] == "BodyMedium"

    def test_downgrade_fails(self, tmp_path):
        """Downgrades exit non-zero."""
        source = tmp_path / "spacer.json"
        source.write_text(json.dumps({"type": "Spacer", "id": "s", "version": 3}))
        result = _run("migrate", str(source), str(tmp_path / "out.json"), "2")
        assert result.returncode == 1
        assert "Migration failed" in result.stderr

    def test_unknown_variant_fails(self, tmp_path):
        """Unknown shapes exit non-zero."""
        source = tmp_path / "mystery.json"
        source.write_text(json.dumps({"type": "Carousel", "id": "m", "version": 1}))
        result = _run("migrate", str(source), str(tmp_path / "out.json"), "2")
        assert result.returncode == 1


@pytest.mark.integration
class TestValidateCommand:
    """Tests for python . validate."""

    def test_valid_registry_document(self, tmp_path):
        """A consistent document with a screen passes."""
        card_path = tmp_path / "card.json"
        assert _run("generate", "enhanced-card", str(card_path)).returncode == 0
        card = json.loads(card_path.read_text())
        document = {
            "tokens": [card],
            "screens": [
                {"id": "home", "tokens": [{"id": "enhanced_card", "bind": {"title": "Welcome"}}]}
            ],
        }
        source = tmp_path / "registry.json"
        source.write_text(json.dumps(document))

        result = _run("validate", str(source), "--register-children")
        assert result.returncode == 0, result.stdout + result.stderr
        assert "Registered 4 token(s)" in result.stdout
        assert "title [Text, 'Welcome']" in result.stdout
        assert "No problems found" in result.stdout

    def test_nested_children_not_registered_by_default(self, tmp_path):
        """Inline children are not registered unless listed or opted in."""
        document = {
            "tokens": [
                {
                    "type": "Card",
                    "id": "enhanced_card",
                    "version": 1,
                    "children": [
                        {"type": "Text", "id": "missing_text", "version": 1, "text": "Hi"}
                    ],
                }
            ]
        }
        source = tmp_path / "registry.json"
        source.write_text(json.dumps(document))

        result = _run("validate", str(source))
        assert result.returncode == 1
        assert "Registered 1 token(s)" in result.stdout
        assert (
            "Token 'enhanced_card' references missing child token 'missing_text'"
            in result.stdout
        )

        opted_in = _run("validate", str(source), "--register-children")
        assert opted_in.returncode == 0, opted_in.stdout + opted_in.stderr

    def test_client_version_from_environment(self, tmp_path):
        """SDUI_CLIENT_VERSION marks newer tokens incompatible."""
        document = {
            "tokens": [{"type": "Spacer", "id": "gap", "version": 3}],
            "screens": [{"id": "home", "tokens": [{"id": "gap"}]}],
        }
        source = tmp_path / "registry.json"
        source.write_text(json.dumps(document))

        assert _run("validate", str(source)).returncode == 0

        result = _run("validate", str(source), extra_env={"SDUI_CLIENT_VERSION": "2"})
        assert result.returncode == 1
        assert "gap [incompatible]" in result.stdout
        assert "Token 'gap' version 3 is newer than client version 2" in result.stdout

    def test_missing_screen_token(self, tmp_path):
        """Screens referencing unknown tokens fail."""
        document = {
            "tokens": [{"type": "Spacer", "id": "s", "version": 1}],
            "screens": [{"id": "home", "tokens": [{"id": "ghost"}]}],
        }
        source = tmp_path / "registry.json"
        source.write_text(json.dumps(document))

        result = _run("validate", str(source))
        assert result.returncode == 1
        assert "references missing token 'ghost'" in result.stdout


@pytest.mark.integration
class TestHelp:
    """Tests for help and unknown commands."""

    def test_help(self):
        """--help lists the commands."""
        result = _run("--help")
        assert result.returncode == 0
        for command in ("generate", "schema", "render", "migrate", "validate"):
            assert command in result.stdout

    def test_unknown_command(self):
        """Unknown commands exit non-zero."""
        assert _run("explode").returncode == 1
