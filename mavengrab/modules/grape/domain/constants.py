"""Constants shared across grape domain objects."""

WILDCARD = "*"
DEFAULT_PACKAGING = "jar"
DEFAULT_LAYOUT = "default"

SCOPE_COMPILE = "compile"
SCOPE_PROVIDED = "provided"
SCOPE_RUNTIME = "runtime"
SCOPE_TEST = "test"
SCOPE_SYSTEM = "system"
SCOPE_IMPORT = "import"
