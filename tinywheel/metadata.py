"""
tinywheel.metadata - Resolve a package descriptor from chunked source

Metadata comes from three places, in strict order of precedence per field:

1. Explicit values in the YAML metadata block
2. Caller-supplied defaults (e.g. the name, taken from the file name)
3. Inference from the README or the environment (git global config)

A field with none of these fails resolution with MissingFieldError. Every
inferred value is announced through a notify callable so the user can see
where it came from.

Usage:
    from tinywheel.chunker import chunk_file
    from tinywheel.metadata import MetadataExtractor

    extractor = MetadataExtractor(chunk_file("tool.py"), {"name": "tool"})
    descriptor = extractor.descriptor
"""

import re
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

import yaml

from tinywheel.chunker import ChunkedSource
from tinywheel.errors import InvalidMetadataSyntax, MissingFieldError

# The keys valid for use in the YAML metadata, in resolution order
SPEC_KEYS = ("author", "email", "name", "version", "summary", "description", "homepage")
EXECUTABLE_KEY = "executable"

VERSION_MATCH = re.compile(
    r"""
    (Version:?|v)\s*    # A version string starting with Version or v
    (\d+\.\d+\.\d+)     # An int.int.int version number
    """,
    re.IGNORECASE | re.VERBOSE,
)
HOMEPAGE_MATCH = re.compile(
    r"""
    ^\s*                # A line starting with any or no whitespace
    \[?Home(page)?:?    # Home, Homepage:, optionally starting a Markdown link
    \s*(\]\()?          # Some more optional Markdown link formatting
    (https?://[^)\n]+)  # Anything url-ish
    \)?
    """,
    re.IGNORECASE | re.VERBOSE | re.MULTILINE,
)
SUMMARY_MATCH = re.compile(r"^.*[^\W_].*$", re.MULTILINE)

IdentityLookup = Callable[[str], Optional[str]]
Notify = Callable[[str], None]


def print_notice(message: str) -> None:
    print(message, file=sys.stderr)


# =============================================================================
# Descriptor
# =============================================================================


@dataclass(frozen=True)
class PackageDescriptor:
    """
    A fully resolved package descriptor.

    All seven SPEC_KEYS fields are non-empty strings. `executable` is the
    optional code run by the generated command line script.
    """

    author: str
    email: str
    name: str
    version: str
    summary: str
    description: str
    homepage: str
    executable: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "description", self.description.strip())

    @property
    def module_name(self) -> str:
        """The importable module name for the library file."""
        return re.sub(r"\W", "_", self.name)

    @property
    def files(self) -> tuple[str, ...]:
        return (f"{self.module_name}.py",)

    @property
    def has_executable(self) -> bool:
        return self.executable is not None


# =============================================================================
# Parsing
# =============================================================================


def _check_scalar(key: str, value: Any, raw_text: str) -> str:
    if isinstance(value, (dict, list)):
        raise InvalidMetadataSyntax(
            raw_text, f"{key} must be a plain value, got {type(value).__name__}"
        )
    return value


def parse_metadata(text: str) -> dict[str, str]:
    """
    Parse the metadata block as a YAML mapping of strings.

    Scalars are kept exactly as written (``1.10`` stays ``"1.10"``, ``yes``
    stays ``"yes"``). Empty metadata gives an empty dict. Keys with empty
    values are dropped.

    Raises:
        InvalidMetadataSyntax: If the text is not valid YAML, is not a
            mapping, or holds nested values.
    """
    try:
        loaded = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        reason = str(e).strip().splitlines()
        raise InvalidMetadataSyntax(text, reason[0] if reason else "") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise InvalidMetadataSyntax(
            text, f"expected a mapping, got {type(loaded).__name__}"
        )

    return {
        key: _check_scalar(key, value, text)
        for key, value in loaded.items()
        if value != ""
    }


# =============================================================================
# Inference
# =============================================================================


def positional_match(source: str, pattern: re.Pattern, group: int) -> Optional[str]:
    """Return the given group of the first match of pattern in source, or None."""
    match = pattern.search(source)
    if match is None:
        return None
    return match.group(group)


def infer_version(readme: str) -> Optional[str]:
    return positional_match(readme, VERSION_MATCH, 2)


def infer_homepage(readme: str) -> Optional[str]:
    url = positional_match(readme, HOMEPAGE_MATCH, 3)
    return url.strip() if url else None


def infer_summary(readme: str) -> Optional[str]:
    """Use the first line with any letters or digits on it."""
    line = positional_match(readme, SUMMARY_MATCH, 0)
    return line.strip() if line else None


def scrub_description(readme: str) -> str:
    """
    Replace FIXME and TODO in README text.

    Package indexes have historically refused descriptions containing these
    words, so they are swapped for harmless stand-ins. Text without them is
    returned unchanged.
    """
    scrubbed = re.sub("FIXME", "FIZZIX-ME", readme, flags=re.IGNORECASE)
    return re.sub("TODO", "TOODLES", scrubbed, flags=re.IGNORECASE)


class _Inference:
    """Field-specific inference for a single resolution."""

    def __init__(self, readme: str, identity: Optional[IdentityLookup], notify: Notify):
        self.readme = readme
        self.identity = identity
        self.notify = notify

    def __call__(self, key: str) -> Optional[str]:
        method = getattr(self, f"infer_{key}", None)
        if method is None:
            return None
        return method() or None

    def _from_identity(self, config_key: str, label: str) -> Optional[str]:
        if self.identity is None:
            return None
        value = self.identity(config_key)
        if value:
            self.notify(f"Using {label} from git as: {value}")
        return value

    def _from_readme(self, value: Optional[str], label: str) -> Optional[str]:
        if value:
            self.notify(f"Using {label} from README: {value}")
        return value

    def infer_author(self):
        return self._from_identity("user.name", "author")

    def infer_email(self):
        return self._from_identity("user.email", "email")

    def infer_version(self):
        return self._from_readme(infer_version(self.readme), "version")

    def infer_homepage(self):
        return self._from_readme(infer_homepage(self.readme), "homepage")

    def infer_summary(self):
        return self._from_readme(infer_summary(self.readme), "summary")

    def infer_description(self):
        description = scrub_description(self.readme)
        if not description.strip():
            return None
        self.notify("Using README as description")
        return description


# =============================================================================
# Resolution
# =============================================================================


def _present(value: Optional[str]) -> Optional[str]:
    """Return value unless it is missing or only whitespace."""
    if value and value.strip():
        return value
    return None


def resolve(
    raw_metadata: Union[str, Mapping[str, str]],
    defaults: Mapping[str, str],
    readme_text: str,
    identity: Optional[IdentityLookup] = None,
    notify: Notify = print_notice,
) -> PackageDescriptor:
    """
    Resolve a PackageDescriptor.

    Args:
        raw_metadata: Parsed metadata mapping, or the raw metadata text
        defaults: Caller-supplied values used when metadata omits a field
        readme_text: README text used for inference
        identity: Lookup for git-style config keys (user.name, user.email),
                  or None to skip environment inference
        notify: Receives a message for every inferred value

    Raises:
        InvalidMetadataSyntax: If raw_metadata is text that is not valid YAML
        MissingFieldError: For the first field in SPEC_KEYS order with no value
    """
    if isinstance(raw_metadata, str):
        raw_metadata = parse_metadata(raw_metadata)

    infer = _Inference(readme_text, identity, notify)
    values: dict[str, str] = {}

    for key in SPEC_KEYS:
        value = _present(raw_metadata.get(key)) or _present(defaults.get(key))
        if not value:
            value = _present(infer(key))
        if not value:
            raise MissingFieldError(key)
        values[key] = value

    return PackageDescriptor(
        executable=_present(raw_metadata.get(EXECUTABLE_KEY)), **values
    )


# =============================================================================
# Extractor
# =============================================================================


@dataclass
class MetadataExtractor:
    """
    Extracts metadata from chunked source, with cached results.

    Checks for explicit values in the YAML metadata first. Any omitted value
    is taken from `defaults`, or inferred from the README or `identity`.
    """

    chunked_source: ChunkedSource
    defaults: Mapping[str, str] = field(default_factory=dict)
    identity: Optional[IdentityLookup] = None
    notify: Notify = print_notice

    _metadata_hash: Optional[dict[str, str]] = field(default=None, init=False, repr=False)
    _descriptor: Optional[PackageDescriptor] = field(default=None, init=False, repr=False)

    @property
    def metadata_hash(self) -> dict[str, str]:
        """The metadata specified in the YAML part of the brief."""
        if self._metadata_hash is None:
            self._metadata_hash = parse_metadata(self.chunked_source.metadata)
        return self._metadata_hash

    @property
    def descriptor(self) -> PackageDescriptor:
        if self._descriptor is None:
            self._descriptor = resolve(
                self.metadata_hash,
                self.defaults,
                self.chunked_source.readme,
                identity=self.identity,
                notify=self.notify,
            )
        return self._descriptor

    @property
    def executable_code(self) -> Optional[str]:
        """Code for the command line script, from the `executable` key."""
        return self.metadata_hash.get(EXECUTABLE_KEY) or None

    @property
    def has_executable(self) -> bool:
        return self.executable_code is not None
