from pathlib import Path

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib

ROOT = Path(__file__).resolve().parents[1]


def test_project_metadata_points_at_readme():
    with open(ROOT / "pyproject.toml", "rb") as handle:
        data = tomllib.load(handle)
    readme = data["project"]["readme"]
    assert readme == "README.md"
    assert (ROOT / readme).is_file()
    assert data["project"]["scripts"]["mmpio"] == "mmpio.cli:main"
