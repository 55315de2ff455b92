from __future__ import annotations


def load_dotenv(env_file: str | None) -> None:
    """Load environment variables from a dotenv file if present.

    Values already present in the process environment win.
    """

    if not env_file:
        return

    from dotenv import load_dotenv as dotenv_load_dotenv

    dotenv_load_dotenv(env_file, override=False)
