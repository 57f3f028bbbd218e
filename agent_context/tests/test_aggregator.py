import os
from datetime import datetime

from agent_context.core.index.aggregator import EMPTY_MESSAGE, ContentAggregator
from agent_context.core.index.metadata_loader import load_package_metadata
from agent_context.core.merge.section_merger import merge
from agent_context.models.context import MetadataStatus
from agent_context.models.document import SectionSpec
from agent_context.storage.context_store import LocalContextStore
from agent_context.version import VERSION

README = """# Example Gem

This is an example gem that provides context for AI agents.
It includes various utilities and helpers.

## Installation

Add this to your Gemfile...
"""

USAGE = """# Usage Guide

Here's how to use this gem effectively.

## Basic Usage

Start by requiring the gem...
"""

def _write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    mode = "wb" if isinstance(content, bytes) else "w"
    with open(path, mode) as f:
        f.write(content)

def _example_context(tmp_path):
    context_path = str(tmp_path / ".context")
    _write(os.path.join(context_path, "example_gem", "README.md"), README)
    _write(os.path.join(context_path, "example_gem", "usage.md"), USAGE)
    return context_path

def _aggregate(context_path):
    store = LocalContextStore(context_path)
    return ContentAggregator(context_path).aggregate(store.collect_groups())

def test_generates_index_with_package_context(tmp_path):
    content = _aggregate(_example_context(tmp_path))

    assert content == (
        "### example_gem\n"
        "\n"
        "Context files for example_gem\n"
        "\n"
        "- **[Example Gem](example_gem/README.md)**\n"
        "  This is an example gem that provides context for AI agents. It includes various utilities and helpers.\n"
        "- **[Usage Guide](example_gem/usage.md)**\n"
        "  Here's how to use this gem effectively."
    )

def test_empty_context_directory(tmp_path):
    context_path = str(tmp_path / ".context")
    os.makedirs(context_path)

    assert _aggregate(context_path) == EMPTY_MESSAGE
    assert ContentAggregator(context_path).aggregate({}) == EMPTY_MESSAGE
    assert ContentAggregator(context_path).aggregate({"empty": []}) == EMPTY_MESSAGE

def test_packages_keep_group_order(tmp_path):
    context_path = str(tmp_path / ".context")
    zeta = os.path.join(context_path, "zeta", "a.md")
    alpha = os.path.join(context_path, "alpha", "a.md")
    _write(zeta, "# Zeta\n")
    _write(alpha, "# Alpha\n")

    content = ContentAggregator(context_path).aggregate({"zeta": [zeta], "alpha": [alpha]})

    assert content.index("### zeta") < content.index("### alpha")
    assert "- **[Zeta](zeta/a.md)**\n\n### alpha" in content

def test_fragment_without_description_has_no_indented_line(tmp_path):
    context_path = str(tmp_path / ".context")
    path = os.path.join(context_path, "pkg", "title-only.md")
    _write(path, "# Title Only\n")

    content = ContentAggregator(context_path).aggregate({"pkg": [path]})

    assert content.endswith("- **[Title Only](pkg/title-only.md)**")

def test_nested_fragment_paths_are_relative_to_install_root(tmp_path):
    context_path = str(tmp_path / ".context")
    path = os.path.join(context_path, "pkg", "guides", "deploy.md")
    _write(path, "Deploying.\n")

    content = ContentAggregator(context_path).aggregate({"pkg": [path]})

    assert "- **[Documentation](pkg/guides/deploy.md)**\n  Deploying." in content

def test_metadata_override(tmp_path):
    context_path = _example_context(tmp_path)
    _write(os.path.join(context_path, "example_gem", "index.yaml"), (
        "description: Helpers for the example gem.\n"
        "files:\n"
        "  - path: README.md\n"
        "    title: Overview\n"
        "    description: ''\n"
    ))

    content = _aggregate(context_path)

    assert "Helpers for the example gem." in content
    assert "Context files for example_gem" not in content
    # Overridden entry is used verbatim, even with an empty description
    assert "- **[Overview](example_gem/README.md)**\n- **[Usage Guide]" in content
    # Files the override does not name are still summarized
    assert "  Here's how to use this gem effectively." in content
    assert "index.yaml" not in content

def test_override_applies_without_reading_the_file(tmp_path):
    context_path = str(tmp_path / ".context")
    path = os.path.join(context_path, "pkg", "binary.md")
    _write(path, b"\xff\xfe not utf-8")
    _write(os.path.join(context_path, "pkg", "index.yaml"), (
        "files:\n  - path: binary.md\n    title: Binary\n    description: Still listed.\n"
    ))

    content = ContentAggregator(context_path).aggregate({"pkg": [path]})

    assert "- **[Binary](pkg/binary.md)**\n  Still listed." in content

def test_multi_line_override_text_stays_inside_the_section(tmp_path):
    context_path = _example_context(tmp_path)
    _write(os.path.join(context_path, "example_gem", "index.yaml"), (
        "description: |\n"
        "  Intro.\n"
        "\n"
        "  ## Notes\n"
        "\n"
        "  more\n"
        "files:\n"
        "  - path: README.md\n"
        "    title: \"Multi\\nline title\"\n"
        "    description: |\n"
        "      First line.\n"
        "      # not a heading\n"
    ))

    content = _aggregate(context_path)

    assert content == (
        "### example_gem\n"
        "\n"
        "Intro. ## Notes more\n"
        "\n"
        "- **[Multi line title](example_gem/README.md)**\n"
        "  First line. # not a heading\n"
        "- **[Usage Guide](example_gem/usage.md)**\n"
        "  Here's how to use this gem effectively."
    )
    assert merge(None, SectionSpec(), content) == "# Agent\n\n## Context\n\n" + content + "\n"

def test_override_text_starting_with_hash_is_escaped(tmp_path):
    context_path = _example_context(tmp_path)
    _write(os.path.join(context_path, "example_gem", "index.yaml"), (
        "description: \"## Looks like a heading\\ntext\"\n"
        "files:\n"
        "  - path: README.md\n"
        "    title: \"   \"\n"
    ))

    content = _aggregate(context_path)

    assert "\n\\## Looks like a heading text\n" in content
    assert "- **[Documentation](example_gem/README.md)**\n" in content
    assert merge(None, SectionSpec(), content).startswith("# Agent\n\n## Context\n\n### example_gem\n")

def test_provenance_line_is_opt_in(tmp_path):
    context_path = _example_context(tmp_path)
    groups = LocalContextStore(context_path).collect_groups()
    generated_at = datetime(2026, 1, 2, 3, 4, 5)
    stamp = f"Generated on 2026-01-02 03:04:05 by agent-context {VERSION}."

    assert "Generated on" not in ContentAggregator(context_path).aggregate(groups, generated_at)

    aggregator = ContentAggregator(context_path, provenance=True)
    assert aggregator.aggregate(groups, generated_at).startswith(stamp + "\n\n### example_gem\n")
    assert aggregator.aggregate({}, generated_at) == stamp + "\n\n" + EMPTY_MESSAGE

def test_malformed_metadata_falls_back(tmp_path, caplog):
    context_path = _example_context(tmp_path)
    _write(os.path.join(context_path, "example_gem", "index.yaml"), "files: [unclosed\n")

    content = _aggregate(context_path)

    assert "Context files for example_gem" in content
    assert "- **[Example Gem](example_gem/README.md)**" in content
    assert any("malformed metadata" in record.message for record in caplog.records)

def test_unreadable_fragment_is_skipped(tmp_path):
    context_path = _example_context(tmp_path)
    _write(os.path.join(context_path, "example_gem", "broken.md"), b"# Broken\n\n\xc3\x28\n")

    content = _aggregate(context_path)

    assert "broken.md" not in content
    assert "- **[Example Gem](example_gem/README.md)**" in content
    assert "- **[Usage Guide](example_gem/usage.md)**" in content

def test_missing_file_is_skipped(tmp_path):
    context_path = _example_context(tmp_path)
    ghost = os.path.join(context_path, "example_gem", "ghost.md")
    readme = os.path.join(context_path, "example_gem", "README.md")

    content = ContentAggregator(context_path).aggregate({"example_gem": [readme, ghost]})

    assert "ghost" not in content
    assert content.endswith("It includes various utilities and helpers.")

def test_summarize_groups(tmp_path):
    context_path = _example_context(tmp_path)
    groups = LocalContextStore(context_path).collect_groups()

    summaries = ContentAggregator(context_path).summarize_groups(groups)
    description, fragments = summaries["example_gem"]

    assert description == "Context files for example_gem"
    assert [f.title for f in fragments] == ["Example Gem", "Usage Guide"]
    assert fragments[0].source_path == "example_gem/README.md"

def test_load_package_metadata_states(tmp_path):
    missing = load_package_metadata(str(tmp_path / "nope.yaml"))
    assert missing.status == MetadataStatus.missing
    assert missing.metadata.files == []

    path = tmp_path / "index.yaml"
    for bad in ["just a string\n", "- a\n- b\n", "files: 3\n", "files:\n  - title: no path\n", "files: [unclosed\n", ""]:
        path.write_text(bad)
        result = load_package_metadata(str(path))
        assert result.status == MetadataStatus.invalid
        assert result.error
        assert result.metadata.description == ""

    path.write_text("description: Fine\nfiles:\n  - path: a.md\n    title: A\n")
    loaded = load_package_metadata(str(path))
    assert loaded.loaded
    assert loaded.metadata.entry_for("a.md").title == "A"
    assert loaded.metadata.entry_for("a.md").description == ""
    assert loaded.metadata.entry_for("b.md") is None
