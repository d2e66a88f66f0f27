"""
Helm values override file handling.

Reads scalar settings out of values-override.yaml and writes a patched copy
with the Zitadel settings of the backend API server filled in. ruamel.yaml
parses the file and reports where each key sits; the patched copy is the
source text with only the replaced lines spliced in, so every other line
is written back byte for byte.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

from intric_deploy.errors import ConfigError, ExtractionError

BACKEND_SECTION = "intricBackendApiServer"

_PLAIN_SAFE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_./:@+=~-]*$")
_RESERVED = re.compile(
    r"^(?:[-+]?[0-9][0-9_.:eE+-]*|\.inf|\.nan|true|false|yes|no|on|off|y|n|null)$",
    re.IGNORECASE,
)
_KEY_HEAD = re.compile(r"""\s*(?:"[^"]*"|'[^']*'|[^:#]+?)\s*:""")


@dataclass
class OverrideFile:
    """A parsed override file together with its source text."""

    path: Path
    text: str
    document: CommentedMap
    # first line -> (line after the replaced value, new line text)
    replacements: Dict[int, Tuple[int, str]] = field(default_factory=dict)


def load_override_file(path: Union[str, Path]) -> OverrideFile:
    """Load an override file, failing before any network work if it is unusable."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Override file not found: {path}")

    with open(path, 'r', encoding='utf-8', newline='') as f:
        text = f.read()

    try:
        document = YAML().load(text)
    except YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if document is None:
        document = CommentedMap()
    if not isinstance(document, dict):
        raise ConfigError(f"Expected a mapping at the top level of {path}")
    return OverrideFile(path, text, document)


def _as_scalar(value: Any, name: str) -> str:
    if value is None or isinstance(value, (dict, list)):
        raise ExtractionError(f"Field '{name}' is not a scalar value")
    text = str(value).strip()
    if not text:
        raise ExtractionError(f"Field '{name}' is empty")
    return text


def extract(document: Dict[str, Any], path: str) -> str:
    """
    Return the scalar at a dotted path such as ``ingress.backendHost``.

    Raises:
        ExtractionError: if a section or the field is missing, or the value
            is empty or not a scalar
    """
    node: Any = document
    for part in path.split('.'):
        if not isinstance(node, dict) or part not in node:
            raise ExtractionError(f"Could not find '{path}'")
        node = node[part]
    return _as_scalar(node, path)


def _walk(node: Any, key: str) -> Iterator[Any]:
    if isinstance(node, dict):
        for k, v in node.items():
            if k == key:
                yield v
            yield from _walk(v, key)
    elif isinstance(node, list):
        for item in node:
            yield from _walk(item, key)


def find_first(document: Dict[str, Any], key: str) -> str:
    """Return the first value stored under ``key`` anywhere in the document."""
    for value in _walk(document, key):
        return _as_scalar(value, key)
    raise ExtractionError(f"Could not find '{key}'")


def extract_any(document: Dict[str, Any], *paths: str) -> str:
    """Return the first of several dotted paths that yields a value."""
    for path in paths:
        try:
            return extract(document, path)
        except ExtractionError:
            continue
    raise ExtractionError(f"Could not find any of: {', '.join(paths)}")


def zitadel_backend_values(
    zitadel_url: str,
    project_id: str,
    client_id: str,
    access_token: str,
) -> Dict[str, Any]:
    """Build the backend API server settings that point at a Zitadel project."""
    return {
        "zitadelEndpoint": zitadel_url,
        "zitadelOpenidConfigEndpoint": f"{zitadel_url}/.well-known/openid-configuration",
        "zitadelProjectClientId": DoubleQuotedScalarString(client_id),
        "zitadelProjectId": DoubleQuotedScalarString(project_id),
        "zitadelKeyEndpoint": f"{zitadel_url}/oauth/v2/keys",
        "zitadelAudience": DoubleQuotedScalarString(client_id),
        "zitadelAccessToken": access_token,
    }


def render_scalar(value: Any) -> str:
    """Render a replacement value as it should appear after ``key: ``."""
    text = str(value)
    if (
        isinstance(value, DoubleQuotedScalarString)
        or not _PLAIN_SAFE.match(text)
        or _RESERVED.match(text)
    ):
        return json.dumps(text)
    return text


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(' '))


def _value_end(lines: List[str], start: int) -> int:
    """Index of the first line after ``start`` that does not continue its value.

    Continuation lines are indented deeper than the key, or are sequence
    items at the key's own indentation. Blank and comment lines count only
    when more continuation follows them.
    """
    key_indent = _indent(lines[start])
    end = start + 1
    for index in range(start + 1, len(lines)):
        stripped = lines[index].strip()
        if not stripped or stripped.startswith('#'):
            continue
        indent = _indent(lines[index])
        flush_item = indent == key_indent and (stripped == "-" or stripped.startswith("- "))
        if indent <= key_indent and not flush_item:
            break
        end = index + 1
    return end


def _replacement_line(target: CommentedMap, key: str, line: str, value: Any) -> str:
    key_line, key_col = target.lc.key(key)
    value_line, value_col = target.lc.value(key)
    current = target[key]

    if value_line == key_line and current is not None and not isinstance(current, (dict, list)):
        head = line[:value_col]
    else:
        match = _KEY_HEAD.match(line, key_col)
        head = (line[:match.end()] if match else line[:key_col] + f"{key}:") + " "

    new_line = head + render_scalar(value)

    comment = target.ca.items.get(key, [None, None, None, None])[2]
    if comment is not None and value_line == key_line and comment.start_mark.line == key_line:
        text = comment.value.split('\n', 1)[0].strip()
        if text:
            new_line += " " * max(1, comment.column - len(new_line)) + text
    return new_line


def patch_section(
    override: OverrideFile,
    values: Dict[str, Any],
    section: str = BACKEND_SECTION,
) -> List[str]:
    """
    Replace keys that already exist directly under ``section``.

    Keys absent from the section are not added, and same-named keys in
    other sections are left alone. Only the lines holding the replaced
    values change; indentation, spacing after the colon and end-of-line
    comments of those lines are kept.

    Returns:
        Names of the keys that were replaced, in ``values`` order
    """
    target: Optional[Any] = override.document.get(section)
    if not isinstance(target, CommentedMap):
        return []
    if target.fa.flow_style():
        raise ConfigError(f"Cannot patch '{section}' in {override.path}: flow-style mappings are not supported")

    lines = override.text.splitlines()
    replaced = []
    for key, value in values.items():
        if key not in target:
            continue
        start = target.lc.key(key)[0]
        end = _value_end(lines, start)
        override.replacements[start] = (end, _replacement_line(target, key, lines[start], value))
        target[key] = value
        replaced.append(key)
    return replaced


def render_override_file(override: OverrideFile) -> str:
    """Return the source text with the pending replacements spliced in."""
    lines = override.text.splitlines(keepends=True)
    out = []
    index = 0
    while index < len(lines):
        if index in override.replacements:
            end, new_line = override.replacements[index]
            ending = lines[end - 1][len(lines[end - 1].rstrip('\r\n')):]
            out.append(new_line + ending)
            index = end
        else:
            out.append(lines[index])
            index += 1
    return "".join(out)


def write_override_file(override: OverrideFile, path: Union[str, Path]) -> Path:
    """Write the patched file to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(render_override_file(override))
    return path
