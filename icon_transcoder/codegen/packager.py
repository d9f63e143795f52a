"""Wrap procedure bodies into a complete Java source file.

Templates are plain text with literal sentinel tokens.  Substitution is
a literal search-and-replace; the produced text is not parsed or
validated.

Sentinels
---------
``TOKEN_PACKAGE``        ``package a.b.c;`` or the empty string
``TOKEN_CLASSNAME``      generated class name
``TOKEN_PAINTING_CODE``  the chained procedure bodies
``TOKEN_ORIG_X``         bounding box x (int)
``TOKEN_ORIG_Y``         bounding box y (int)
``TOKEN_ORIG_WIDTH``     bounding box width (int)
``TOKEN_ORIG_HEIGHT``    bounding box height (int)

The painting code is substituted last so that no generated statement is
ever mistaken for a sentinel.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from icon_transcoder.codegen.walker import BoundingBox

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

TOKEN_PACKAGE = "TOKEN_PACKAGE"
TOKEN_CLASSNAME = "TOKEN_CLASSNAME"
TOKEN_PAINTING_CODE = "TOKEN_PAINTING_CODE"
TOKEN_ORIG_X = "TOKEN_ORIG_X"
TOKEN_ORIG_Y = "TOKEN_ORIG_Y"
TOKEN_ORIG_WIDTH = "TOKEN_ORIG_WIDTH"
TOKEN_ORIG_HEIGHT = "TOKEN_ORIG_HEIGHT"

TEMPLATE_NAMES = ("plain", "resizable")

# Closes procedure n-1 and opens procedure n.  The ``shape`` parameter
# carries the current geometry across the call.
_SEPARATOR = (
    "{indent}paint{n}(g, origAlpha, transformations, shape);\n"
    "    }}\n"
    "\n"
    "    private static void paint{n}(Graphics2D g, float origAlpha, "
    "LinkedList<AffineTransform> transformations, Shape shape) {{\n"
)


def read_template(name: str) -> str:
    """Load a bundled template by name (``plain`` or ``resizable``).

    Raises
    ------
    ValueError
        If *name* is not a bundled template.
    """
    if name not in TEMPLATE_NAMES:
        raise ValueError(
            f"Unknown template {name!r}; expected one of {TEMPLATE_NAMES}"
        )
    path = TEMPLATE_DIR / f"{name}.templ"
    return path.read_text(encoding="utf-8")


def _indent_body(body: str, indent: str) -> str:
    return "".join(
        indent + line if line.strip() else line
        for line in body.splitlines(keepends=True)
    )


class TemplatePackager:
    """Fill a source skeleton with chained painting procedures.

    Parameters
    ----------
    template : str
        Skeleton text containing the sentinel tokens.
    indent : int
        Spaces prepended to every non-blank body line.
    """

    def __init__(self, template: str, indent: int = 8) -> None:
        if indent < 0:
            raise ValueError(f"indent must be >= 0, got {indent}")
        self.template = template
        self.indent = indent

    @classmethod
    def bundled(cls, resizable: bool = False, indent: int = 8) -> TemplatePackager:
        """Packager for the shipped plain or resizable skeleton."""
        return cls(read_template("resizable" if resizable else "plain"), indent=indent)

    def painting_code(self, bodies: Sequence[str]) -> str:
        """Join *bodies* into chained procedures.

        Body 0 lands in the template's first procedure; every following
        body gets its own ``paint<n>`` procedure, called at the end of the
        previous one.
        """
        pad = " " * self.indent
        parts: list[str] = []
        for n, body in enumerate(bodies):
            if n > 0:
                parts.append(_SEPARATOR.format(indent=pad, n=n))
            parts.append(_indent_body(body, pad))
        return "".join(parts)

    def package(
        self,
        bodies: Sequence[str],
        class_name: str,
        package: str | None,
        bounds: BoundingBox,
    ) -> str:
        """Return the complete source text.

        Parameters
        ----------
        bodies : Sequence[str]
            Procedure bodies from the chunker, in call order.
        class_name : str
            Generated class name.
        package : str | None
            Dotted package name; ``None`` or empty omits the declaration.
        bounds : BoundingBox
            Drawing bounds reported by the generated accessors.
        """
        text = self.template
        text = text.replace(TOKEN_PACKAGE, f"package {package};" if package else "")
        text = text.replace(TOKEN_CLASSNAME, class_name)
        text = text.replace(TOKEN_ORIG_X, str(bounds.x))
        text = text.replace(TOKEN_ORIG_Y, str(bounds.y))
        text = text.replace(TOKEN_ORIG_WIDTH, str(bounds.width))
        text = text.replace(TOKEN_ORIG_HEIGHT, str(bounds.height))

        code = self.painting_code(bodies)
        if TOKEN_PAINTING_CODE + "\n" in text:
            text = text.replace(TOKEN_PAINTING_CODE + "\n", code, 1)
        else:
            text = text.replace(TOKEN_PAINTING_CODE, code, 1)

        logger.debug(
            "Packaged %s with %d procedure(s)", class_name, max(len(bodies), 1),
        )
        return text
