"""Generation manifest (Human View)

Summarizes one generation run as YAML: which validators are emitted under
which names and which identifier each shared reference received. Useful for
reviewing diffs of generated modules.
"""

from typing import Any

import yaml

from jsval.core.constraints import JSVal
from jsval.generators.program import Generator, GeneratorOptions
from jsval.generators.references import collect_references


class ManifestGenerator:
    """Generates a YAML manifest for a set of validators"""

    def __init__(self, validators: list[JSVal], options: GeneratorOptions | None = None):
        self.validators = list(validators)
        self.options = options or GeneratorOptions()

    def generate(self) -> str:
        """Generate the manifest YAML"""
        return yaml.dump(self.build(), allow_unicode=True, default_flow_style=False, sort_keys=False)

    def build(self) -> dict[str, Any]:
        table = collect_references(self.validators, self.options.reference_prefix)
        names = Generator(self.options).validator_names(self.validators, table)

        manifest: dict[str, Any] = {
            "prefix": self.options.prefix,
            "validators": [
                {"name": name, "root": v.root.kind.value}
                for name, v in zip(names, self.validators)
            ],
            "references": [
                {"name": name, "identifier": identifier, "kind": constraint.kind.value}
                for name, identifier, constraint in table.items()
            ],
        }
        if table:
            manifest["table"] = self.options.table_name
        return manifest
