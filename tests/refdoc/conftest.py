from __future__ import annotations

import json
from pathlib import Path

import pytest
from ruamel.yaml import YAML

from refdoc.snippets.descriptions import ComponentRecord, DescriptionIndex

REFERENCE = """\
version: "2" # configuration version
run:
  timeout: 5m
  build-tags:
    - mytag
linters:
  default: standard
  enable:
    - nolintlint
  settings:
    nolintlint:
      # Disable to ensure that all nolint directives actually have an effect.
      allow-unused: false
      require-specific: true
    unused:
      field-writes-are-uses: false
formatters:
  enable: [gofmt, goimports]
  settings:
    gofmt:
      simplify: true
issues:
  max-same-issues: 3
custom-plugins: true
"""

COMMENTED_REFERENCE = """\
# This file contains all available configuration options.

# Defines the configuration version.
version: "2"
# Options for analysis running.
run:
  # Timeout for total work.
  timeout: 5m # default: 0
  hook: |
    # not a comment
    echo done
# Linters configuration.
linters:
  settings:
    # nolintlint head
    nolintlint:
      allow-unused: false
      require-specific: true
    # unused head
    unused:
      field-writes-are-uses: false
# Issues configuration.
issues:
  exclude: "a # b"
# End of the reference.
"""

LINTERS_INFO = [
    {
        "name": "nolintlint",
        "desc": "reports ill-formed or insufficient nolint directives",
        "groups": {"standard": {}},
        "canAutoFix": True,
        "since": "v1.26.0",
        "originalURL": "https://github.com/golangci/golangci-lint/tree/main/pkg/golinters/nolintlint",
    },
    {
        "name": "typecheck",
        "desc": "internal checker",
        "internal": True,
    },
]

FORMATTERS_INFO = [
    {
        "name": "gofmt",
        "desc": "checks if the code is formatted according to 'gofmt' command",
        "since": "v1.0.0",
    },
]


def yaml_block(text: str) -> object:
    """Load the first fenced YAML block of a snippet."""
    start = text.index("```yaml\n") + len("```yaml\n")
    end = text.index("```", start)
    return YAML(typ="safe").load(text[start:end])


@pytest.fixture()
def reference_text() -> str:
    return REFERENCE


@pytest.fixture()
def commented_reference_text() -> str:
    return COMMENTED_REFERENCE


@pytest.fixture()
def description_index() -> DescriptionIndex:
    records = [ComponentRecord.model_validate(item) for item in LINTERS_INFO + FORMATTERS_INFO]
    return DescriptionIndex.from_records(records)


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """Directory with a reference document and both metadata files."""
    (tmp_path / ".golangci.reference.yml").write_text(REFERENCE, encoding="utf-8")
    assets = tmp_path / "assets"
    assets.mkdir()
    (assets / "linters-info.json").write_text(json.dumps(LINTERS_INFO), encoding="utf-8")
    (assets / "formatters-info.json").write_text(json.dumps(FORMATTERS_INFO), encoding="utf-8")
    return tmp_path


@pytest.fixture()
def load_block():
    return yaml_block
