import pytest

from emu2600cv.main import main


@pytest.fixture
def rom_2k_file(tmp_path, rom_2k):
    path = tmp_path / "game.bin"
    path.write_bytes(rom_2k)
    return str(path)


@pytest.fixture
def rom_4k_file(tmp_path, image_4k):
    path = tmp_path / "magicard.bin"
    path.write_bytes(image_4k)
    return str(path)


def _dump_lines(out):
    return [line for line in out.splitlines() if line.startswith("$1")]


def test_info(rom_4k_file, capsys):
    assert main([rom_4k_file, "--info"]) == 0
    out = capsys.readouterr().out
    assert "Image Size" in out
    assert "4096" in out
    assert "Rom Md5" in out


def test_missing_rom(tmp_path, capsys):
    assert main([str(tmp_path / "missing.bin")]) == 1
    assert "not found" in capsys.readouterr().err


def test_bad_image_size(tmp_path, capsys):
    path = tmp_path / "odd.bin"
    path.write_bytes(bytes(3000))
    assert main([str(path)]) == 1
    assert "Error" in capsys.readouterr().err


def test_dump_ram_shows_payload(rom_4k_file, ram_payload, capsys):
    assert main([rom_4k_file, "--dump-ram"]) == 0
    lines = _dump_lines(capsys.readouterr().out)
    assert len(lines) == 64
    assert lines[0] == "$1000: " + " ".join(f"{b:02X}" for b in ram_payload[:16])
    assert lines[-1].startswith("$13F0: ")


def test_peek_write_port_latches_previous_read(rom_2k_file, rom_2k, capsys):
    assert main([rom_2k_file, "--no-ram-random", "--peek", "$1803",
                 "--peek", "0x1400", "--peek", "0x1000"]) == 0
    out = capsys.readouterr().out.splitlines()
    value = f"${rom_2k[3]:02X}"
    assert out == [f"$1803 = {value}", f"$1400 = {value}", f"$1000 = {value}"]


def test_save_then_load_state(rom_2k_file, tmp_path, capsys):
    state = str(tmp_path / "game.sta")
    assert main([rom_2k_file, "--seed", "7", "--dump-ram", "--save-state", state]) == 0
    saved_dump = _dump_lines(capsys.readouterr().out)

    assert main([rom_2k_file, "--seed", "8", "--load-state", state, "--dump-ram"]) == 0
    assert _dump_lines(capsys.readouterr().out) == saved_dump


def test_load_state_from_wrong_cart(rom_2k_file, tmp_path, capsys):
    state = tmp_path / "other.sta"
    state.write_bytes(b"\x04\x00\x00\x00F8SC" + bytes(128))
    assert main([rom_2k_file, "--load-state", str(state)]) == 1
    assert "failed to restore CartridgeCV state" in capsys.readouterr().err


def test_invalid_ram_fill(rom_2k_file, capsys):
    assert main([rom_2k_file, "--no-ram-random", "--ram-fill", "0x100"]) == 1
    assert "ram_fill" in capsys.readouterr().err


def test_load_state_truncated_file(rom_2k_file, tmp_path, capsys):
    state = str(tmp_path / "game.sta")
    assert main([rom_2k_file, "--save-state", state]) == 0
    with open(state, "r+b") as fh:
        fh.truncate(100)
    capsys.readouterr()

    assert main([rom_2k_file, "--load-state", state]) == 1
    assert "failed to restore CartridgeCV state" in capsys.readouterr().err
