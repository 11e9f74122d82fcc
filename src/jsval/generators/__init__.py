"""jsval Code Generators.

- references  - Shared reference table (sorted names, R0..Rn identifiers)
- serializer  - Constraint node to builder-chain expression
- program     - Complete module with declarations and init function
- formatter   - Formatting/syntax check of generated source
- manifest_gen - YAML summary of a generation run
"""

from jsval.generators.context import GenerationContext
from jsval.generators.references import ReferenceTable, collect_references
from jsval.generators.serializer import NodeSerializer
from jsval.generators.program import Generator, GeneratorOptions
from jsval.generators.formatter import AstFormatter, CheckedFormatter, get_formatter
from jsval.generators.manifest_gen import ManifestGenerator

__all__ = [
    "GenerationContext",
    "ReferenceTable",
    "collect_references",
    "NodeSerializer",
    "Generator",
    "GeneratorOptions",
    "AstFormatter",
    "CheckedFormatter",
    "get_formatter",
    "ManifestGenerator",
]
