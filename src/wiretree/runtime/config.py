from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Union


@dataclass
class Config:
    """Settings shared by every widget rendered in a context.

    Attributes:
        template_dirs: Directories searched for widget views and layouts.
        default_frame: Tag wrapped around rendered widgets when ``frame`` is not given.
        max_invoke_depth: Maximum nesting of invoke/jump calls in one render pass.
        autoescape: Autoescape ``.html``/``.xml`` templates.
        debug: Verbose logging in the CLI.
    """

    template_dirs: List[Path] = field(default_factory=list)
    default_frame: str = "div"
    max_invoke_depth: int = 100
    autoescape: bool = True
    debug: bool = False

    def __post_init__(self) -> None:
        self.template_dirs = [Path(p) for p in self.template_dirs]
        if self.max_invoke_depth < 1:
            raise ValueError("max_invoke_depth must be at least 1")

    @classmethod
    def for_dirs(cls, *dirs: Union[str, Path], **kwargs: Any) -> "Config":
        return cls(template_dirs=[Path(d) for d in dirs], **kwargs)
