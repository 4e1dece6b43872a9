import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

TEMPLATE_DIR = Path(__file__).parent / 'templates'


@dataclass
class SiteConfig:
    host: str = '127.0.0.1'
    port: int = 8000
    content_dir: Path = Path('content')
    template_dir: Path = TEMPLATE_DIR
    gzip: bool = True
    markdown_extensions: List[str] = field(default_factory=lambda: ['fenced_code', 'tables'])

    def __post_init__(self):
        self.content_dir = Path(self.content_dir)
        self.template_dir = Path(self.template_dir)
        self.port = int(self.port)

    @classmethod
    def from_yaml(cls, path) -> 'SiteConfig':
        with open(path, 'r') as f:
            values = yaml.safe_load(f) or {}
        if not isinstance(values, dict):
            raise ValueError(f'{path}: expected a mapping at the top level')
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f'{path}: unknown config keys {", ".join(unknown)}')
        return cls(**values)

    @classmethod
    def from_args(cls, args, base: Optional['SiteConfig'] = None) -> 'SiteConfig':
        """Overlay the options that were given on the command line onto ``base``.

        ``base`` defaults to the file named by ``args.config``, or to the
        built-in defaults when there is none.
        """
        if base is None:
            config_path = getattr(args, 'config', None)
            base = cls.from_yaml(config_path) if config_path else cls()
        overrides = {
            name: getattr(args, name)
            for name in ('host', 'port', 'content_dir', 'template_dir')
            if getattr(args, name, None) is not None
        }
        return dataclasses.replace(base, **overrides)
