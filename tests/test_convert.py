from PIL import Image

from maskframe.convert import main


def test_text_to_files(tmp_path):
    out = tmp_path / "hi"
    assert main(["--text", "Hi", "--font", "default", "--out", str(out)]) == 0
    bitmap = (tmp_path / "hi.bitmap.bin").read_bytes()
    colors = (tmp_path / "hi.colors.bin").read_bytes()
    assert len(bitmap) > 0
    assert len(colors) == 3 * (len(bitmap) // 2)


def test_image_to_files(tmp_path):
    src = tmp_path / "logo.png"
    Image.new("RGB", (120, 36), "white").save(src)
    assert main([str(src), "--debug-dir", str(tmp_path / "debug")]) == 0
    assert (tmp_path / "logo.bitmap.bin").read_bytes() == b"\xff\xf0" * 40
    assert (tmp_path / "debug" / "resized.png").exists()


def test_unreadable_image_fails(tmp_path):
    assert main([str(tmp_path / "missing.png")]) == 1
