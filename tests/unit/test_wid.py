from wajs.core.wid import (
    STATUS_BROADCAST,
    Wid,
    is_group_wid,
    is_lid_wid,
    is_status_broadcast,
    is_user_wid,
    serialize_wid,
    to_user_wid,
    wid_decode,
    wid_encode,
)


def test_wid_decode_from_string_and_remote_object() -> None:
    assert wid_decode("628111@c.us") == Wid(user="628111", server="c.us")
    assert wid_decode({"user": "1203", "server": "g.us", "_serialized": "1203@g.us"}) == Wid(user="1203", server="g.us")
    assert wid_decode({"_serialized": "status@broadcast"}) == Wid(user="status", server="broadcast")
    assert wid_decode("") is None
    assert wid_decode(None) is None


def test_wid_encode_and_serialize() -> None:
    assert wid_encode("628111", "c.us") == "628111@c.us"
    assert wid_encode("", "c.us") == "c.us"
    assert serialize_wid({"_serialized": "1@c.us"}) == "1@c.us"
    assert serialize_wid({"user": "1", "server": "c.us"}) == "1@c.us"
    assert serialize_wid("1@g.us") == "1@g.us"
    assert serialize_wid(None) is None


def test_wid_classifiers() -> None:
    assert is_group_wid("1203-55@g.us")
    assert not is_group_wid("1@c.us")
    assert is_user_wid("1@c.us")
    assert is_user_wid("1@s.whatsapp.net")
    assert not is_user_wid("1@g.us")
    assert is_lid_wid("999@lid")
    assert is_status_broadcast(STATUS_BROADCAST)
    assert not is_status_broadcast("1@broadcast")


def test_to_user_wid_is_idempotent() -> None:
    assert to_user_wid("628111") == "628111@c.us"
    assert to_user_wid("628111@c.us") == "628111@c.us"
