import re

import pytest

from services import docs_updater
from services.docs_updater import (
    classify_component,
    format_token_value,
    group_screenshots,
    inject_screenshots,
    update_documentation,
)
from services.screenshots import ScreenshotRecord
from services.tokens import transform_variables_to_tokens


def _shot(node_id: str) -> ScreenshotRecord:
    safe = node_id.replace(":", "-")
    return ScreenshotRecord(node_id, safe, f"figma-{safe}.png", f"https://raw.example/{safe}.png")


@pytest.fixture
def frozen_clock(monkeypatch):
    monkeypatch.setattr(docs_updater, "_local_timestamp", lambda: "2026-10-17 09:30:00")


def _read_all(root):
    return {p.relative_to(root).as_posix(): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


def test_introduction_placeholders_all_replaced(settings, frozen_clock):
    update_documentation(None, [], settings)
    intro = settings.introduction_path.read_text(encoding="utf-8")
    assert "[AUTO-GENERATED]" not in intro
    assert intro.count("Last sync: 2026-10-17 09:30:00") == 2


def test_missing_introduction_is_skipped(settings, caplog):
    settings.introduction_path.unlink()
    with caplog.at_level("WARNING", logger="figma_sync.docs"):
        update_documentation(None, [], settings)
    assert "introduction.mdx not found" in caplog.text


def test_token_pages_list_every_token(settings, variables_payload, frozen_clock):
    tokens = transform_variables_to_tokens(variables_payload)
    update_documentation(tokens, [], settings)

    colors = (settings.tokens_dir / "colors.mdx").read_text(encoding="utf-8")
    assert colors.startswith('---\ntitle: "Colors"\n')
    assert "# Color Tokens" in colors
    assert "<Note>Last synced: 2026-10-17 09:30:00</Note>" in colors
    assert "## Primary Color\n- **Value**: `#0055ff`\n- **Type**: color" in colors
    assert "background-color: #0055ff;" in colors

    spacing = (settings.tokens_dir / "spacing.mdx").read_text(encoding="utf-8")
    assert "## Spacing/sm\n- **Value**: `8px`\n- **Type**: dimension" in spacing

    typography = (settings.tokens_dir / "typography.mdx").read_text(encoding="utf-8")
    assert "## Font Family" in typography and "## Heading" in typography
    assert "Radius/lg" not in colors + spacing + typography


def test_token_pages_untouched_without_tokens(settings):
    settings.tokens_dir.mkdir(parents=True, exist_ok=True)
    (settings.tokens_dir / "colors.mdx").write_text("hand-written", encoding="utf-8")
    update_documentation(None, [_shot("alert:1")], settings)
    assert (settings.tokens_dir / "colors.mdx").read_text(encoding="utf-8") == "hand-written"
    assert not (settings.tokens_dir / "spacing.mdx").exists()


@pytest.mark.parametrize("node_id, group", [
    ("Alert:1", "alerts"),
    ("22123:476643", "alerts"),
    ("form-login", "forms"),
    ("TextInput:2", "forms"),
    ("field:9", "forms"),
    ("card:3", "cards"),
    ("12:34", "other"),
])
def test_component_classifier(node_id, group):
    assert classify_component(node_id) == group


def test_grouping_is_exclusive():
    groups = group_screenshots([_shot("alert-card:1"), _shot("card:2"), _shot("1:1")])
    assert [s.node_id for s in groups["alerts"]] == ["alert-card:1"]
    assert [s.node_id for s in groups["cards"]] == ["card:2"]
    assert [s.node_id for s in groups["other"]] == ["1:1"]
    assert groups["forms"] == []


def test_screenshot_section_replaced_and_warning_removed(settings, frozen_clock):
    update_documentation(None, [_shot("22123:476643"), _shot("alert:2")], settings)
    page = (settings.components_dir / "alerts.mdx").read_text(encoding="utf-8")

    assert "<Warning>" not in page
    assert "Screenshots will appear here" not in page
    assert "Last updated: 2026-10-17 09:30:00" in page
    assert "### 22123-476643" in page and "### alert-2" in page
    assert 'src="https://raw.example/22123-476643.png"' in page
    assert 'alt="Component screenshot for 22123:476643"' in page
    # following section survives
    assert page.rstrip().endswith("## Usage\n\nUse alerts sparingly.")
    assert page.count("## Component Screenshots") == 1


def test_missing_component_page_is_skipped(settings, caplog):
    with caplog.at_level("WARNING", logger="figma_sync.docs"):
        update_documentation(None, [_shot("card:1")], settings)
    assert "cards.mdx not found" in caplog.text
    assert not (settings.components_dir / "cards.mdx").exists()


def test_other_group_touches_no_page(settings):
    before = _read_all(settings.docs_root)
    update_documentation(None, [_shot("12:34")], settings)
    after = _read_all(settings.docs_root)
    assert after["components/alerts.mdx"] == before["components/alerts.mdx"]


def test_section_appended_when_absent():
    content = "# Cards\n\nIntro.\n"
    out = inject_screenshots(content, [_shot("card:1")])
    assert out.startswith("# Cards\n\nIntro.\n\n## Component Screenshots\n")
    assert out.endswith("/>\n")


def test_running_twice_is_idempotent_except_timestamps(settings, variables_payload, monkeypatch):
    tokens = transform_variables_to_tokens(variables_payload)
    shots = [_shot("alert:1"), _shot("card:2")]
    (settings.components_dir / "cards.mdx").write_text(
        "# Cards\n\n## Component Screenshots\n\nTBD\n", encoding="utf-8"
    )
    settings.introduction_path.write_text("Last sync: [AUTO-GENERATED]\n", encoding="utf-8")

    monkeypatch.setattr(docs_updater, "_local_timestamp", lambda: "2026-10-17 09:30:00")
    update_documentation(tokens, shots, settings)
    first = _read_all(settings.docs_root)

    monkeypatch.setattr(docs_updater, "_local_timestamp", lambda: "2026-10-17 10:45:12")
    update_documentation(tokens, shots, settings)
    second = _read_all(settings.docs_root)

    ts = re.compile(rb"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")
    assert first.keys() == second.keys()
    for name in first:
        assert ts.sub(b"<ts>", first[name]) == ts.sub(b"<ts>", second[name]), name


def test_format_token_value_handles_figma_rgba():
    assert format_token_value({"r": 1, "g": 0.5, "b": 0, "a": 1}) == "rgba(255, 128, 0, 1)"
    assert format_token_value({"type": "VARIABLE_ALIAS", "id": "V:9"}) == '{"id": "V:9", "type": "VARIABLE_ALIAS"}'
    assert format_token_value(8) == "8"
