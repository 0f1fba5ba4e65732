from pathlib import Path
from unittest.mock import Mock

import pytest

from fxresolve.resolution.engine.pack_locator import locate_targeting_pack, targeting_pack_path


def test_targeting_pack_path_layout():
    """Packs live at root/package/version."""
    assert targeting_pack_path("/packs", "Core.Ref", "6.0.9") == Path("/packs") / "Core.Ref" / "6.0.9"


def test_locate_finds_existing_directory(tmp_path):
    """An installed pack directory is returned."""
    pack = tmp_path / "PackName" / "1.2.3"
    pack.mkdir(parents=True)
    assert locate_targeting_pack(tmp_path, "PackName", "1.2.3") == pack


def test_locate_missing_directory(tmp_path):
    """A pack that is not installed yields None."""
    (tmp_path / "PackName" / "1.2.2").mkdir(parents=True)
    assert locate_targeting_pack(tmp_path, "PackName", "1.2.3") is None


def test_locate_ignores_plain_file(tmp_path):
    """A file where the pack directory should be does not count."""
    (tmp_path / "PackName").mkdir()
    (tmp_path / "PackName" / "1.2.3").write_text("", encoding="utf-8")
    assert locate_targeting_pack(tmp_path, "PackName", "1.2.3") is None


@pytest.mark.parametrize("root", [None, ""])
def test_locate_without_root_never_probes(root):
    """Without a pack root nothing is probed."""
    probe = Mock(return_value=True)
    assert locate_targeting_pack(root, "PackName", "1.2.3", probe) is None
    probe.assert_not_called()


def test_locate_uses_probe():
    """The probe is asked about exactly the composed path."""
    probe = Mock(return_value=True)
    assert locate_targeting_pack("/packs", "PackName", "1.2.3", probe) == Path("/packs/PackName/1.2.3")
    probe.assert_called_once_with(Path("/packs/PackName/1.2.3"))


def test_locate_propagates_probe_errors():
    """Errors from the probe are not swallowed."""
    probe = Mock(side_effect=PermissionError("denied"))
    with pytest.raises(PermissionError):
        locate_targeting_pack("/packs", "PackName", "1.2.3", probe)
