from datetime import datetime
from pathlib import Path

from procmon.util.time_utils import format_export_time

EXPORT_DIR_NAME = "exports"


def resolve_export_dir(export_dir: str | Path | None = None) -> Path:
    """
    Resolve the directory export artifacts are written to.

    Args:
        export_dir: Absolute or working-directory-relative path. Defaults to
                    "<cwd>/exports".

    Returns:
        Absolute directory path (not created)
    """
    if export_dir is None:
        return Path.cwd() / EXPORT_DIR_NAME
    path = Path(export_dir)
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def export_file_path(first_frame: datetime, extension: str, export_dir: str | Path | None = None) -> Path:
    """
    Build the artifact path for a recording and make sure its directory exists.

    Args:
        first_frame: Timestamp of the first committed frame
        extension: Exporter file extension including the dot (e.g. ".json")
        export_dir: Target directory, see resolve_export_dir

    Returns:
        Path of the form <export_dir>/<yyyy_MM_dd_HH_mm_ss>.export<extension>
    """
    directory = resolve_export_dir(export_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"{format_export_time(first_frame)}.export{extension}"


def write_text(path: Path, text: str) -> Path:
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
        f.flush()
    return path
