"""Build error taxonomy: per-document failures and whole-build fatals"""


class BuildError(Exception):
    """Base class for every error raised by the build pipeline."""


# --- per-document: the document is dropped, the build continues ---

class DocumentError(BuildError):
    """A failure isolated to one source document."""

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"{source}: {message}")


class ParseError(DocumentError):
    """Frontmatter missing required fields or undecodable."""


class DirectiveSyntaxError(DocumentError):
    """Malformed {{ ... }} directive in a document body."""

    def __init__(self, source: str, line: int, message: str):
        self.line = line
        super().__init__(source, f"line {line}: {message}")


class UnknownDirectiveError(DocumentError):
    """Directive name outside the supported set."""

    def __init__(self, name: str, source: str, line: int):
        self.name = name
        self.line = line
        super().__init__(source, f"line {line}: unknown directive '{name}'")


class DirectiveParameterError(DocumentError):
    """Known directive called with an unsupported or invalid parameter."""

    def __init__(self, source: str, line: int, message: str):
        self.line = line
        super().__init__(source, f"line {line}: {message}")


class TemplateError(DocumentError):
    """Requested page template does not exist."""


# --- global: the build is aborted ---

class DiscoveryError(BuildError):
    """Source root missing or not a directory."""


class DuplicateSlugError(BuildError):
    """Two documents resolve to the same slug."""

    def __init__(self, slug: str, first: str, second: str):
        self.slug = slug
        self.sources = (first, second)
        super().__init__(f"duplicate slug '{slug}': {first} and {second}")


class OutputCollisionError(BuildError):
    """Two sources would be written to the same output path."""

    def __init__(self, destination: str, first: str, second: str):
        self.destination = destination
        self.sources = (first, second)
        super().__init__(f"output path '{destination}' claimed by {first} and {second}")


class WriteError(BuildError):
    """I/O failure while emitting the site."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"failed to write {path}: {cause}")
