"""Module entrypoint for ``python -m commentview``.

All argument parsing happens in ``commentview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
