import base64

import pytest

from services.models import MediaKind
from utils.payload import (
    MAX_CALLBACK_BYTES,
    MalformedPayload,
    decode_payload,
    encode_payload,
    pack_choice,
    unpack_choice,
)


def test_encoding_format():
    url = "https://vm.tiktok.com/ZMabc123/"
    expected = "tt_dl:video:" + base64.b64encode(url.encode()).decode()
    assert encode_payload(MediaKind.VIDEO, url) == expected


@pytest.mark.parametrize("url", [
    "https://www.tiktok.com/@u/video/1?lang=en&is_from_webapp=1",
    "https://vm.tiktok.com:443/ZM:abc/",
])
def test_round_trip_with_reserved_characters(url):
    for kind in MediaKind:
        assert decode_payload(encode_payload(kind, url)) == (kind, url)


@pytest.mark.parametrize("data", [
    "",
    "help",
    "tt_dl:video",
    "tt_dl:video:aGVsbG8=:extra",
    "other:video:aGVsbG8=",
    "tt_dl:gif:aGVsbG8=",
    "tt_dl:video:",
    "tt_dl:video:!!!not-base64!!!",
    "tt_dl:audio:" + base64.b64encode(b"\xff\xfe\xfd").decode(),
])
def test_decode_rejects_garbage(data):
    with pytest.raises(MalformedPayload):
        decode_payload(data)


class TestPackChoice:
    def test_short_url_goes_inline(self, links):
        url = "https://vm.tiktok.com/ZMabc123/"
        payload = pack_choice(MediaKind.AUDIO, url, links)

        assert payload.startswith("tt_dl:audio:")
        assert unpack_choice(payload, links) == (MediaKind.AUDIO, url)

    def test_long_url_goes_by_reference(self, links):
        url = "https://www.tiktok.com/@someone.with.a.long.name/video/7301234567890123456"
        payload = pack_choice(MediaKind.PHOTOS, url, links)

        assert payload.startswith("tt_ref:photos:")
        assert len(payload.encode()) <= MAX_CALLBACK_BYTES
        assert unpack_choice(payload, links) == (MediaKind.PHOTOS, url)

    def test_unknown_reference(self, links):
        with pytest.raises(MalformedPayload):
            unpack_choice("tt_ref:video:deadbeef0000", links)
