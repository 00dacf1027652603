import io

from wsbase.mask import Masker, gen_mask, mask_data


def test_mask_data():
    key = bytes([1, 2, 3, 4])
    original = bytes([10, 11, 12, 13, 14, 15, 16, 17])
    expected = bytes([11, 9, 15, 9, 15, 13, 19, 21])
    obtained = mask_data(key, original)
    reversed_ = mask_data(key, obtained)
    assert original == reversed_
    assert obtained == expected


def test_gen_mask_has_four_bytes():
    assert len(gen_mask()) == 4


def test_masker_matches_mask_data_across_writes():
    key = bytes([1, 2, 3, 4])
    payload = b"The quick brown fox jumps over the lazy dog"
    sink = io.BytesIO()
    masker = Masker(key, sink)
    masker.write(payload[:5])
    masker.write(payload[5:6])
    masker.write(payload[6:])
    masker.flush()
    assert sink.getvalue() == mask_data(key, payload)


def test_masker_returns_written_count():
    sink = io.BytesIO()
    assert Masker(bytes([9, 9, 9, 9]), sink).write(b"abc") == 3