from wajs.client.identity_change import IdentityChange, detect_identity_change


def test_participant_modify_reports_old_and_new_id() -> None:
    change = detect_identity_change(
        {"type": "gp2", "subtype": "modify", "author": "111@c.us", "recipients": ["222@c.us"]}
    )
    assert change == IdentityChange(old_id="111@c.us", new_id="222@c.us", is_contact=False)


def test_contact_change_number_reports_old_and_new_id() -> None:
    change = detect_identity_change(
        {
            "type": "notification_template",
            "subtype": "change_number",
            "to": {"_serialized": "222@c.us"},
            "templateParams": ["222@c.us", "111@c.us"],
        }
    )
    assert change == IdentityChange(old_id="111@c.us", new_id="222@c.us", is_contact=True)


def test_other_payloads_are_not_identity_changes() -> None:
    assert detect_identity_change({"type": "gp2", "subtype": "add"}) is None
    assert detect_identity_change({"type": "chat"}) is None
