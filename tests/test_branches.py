from rewards_admin.services.branches import split_submission


def test_split_keeps_organization_on_both_halves_and_drops_ids() -> None:
    address, branch = split_submission(
        {
            "id": "branch-id",
            "address_id": "address-id",
            "organization_id": "org-id",
            "name": "Centro",
            "street": "Main",
            "zip_code": "00001",
        }
    )

    assert address == {"street": "Main", "zip_code": "00001", "organization_id": "org-id"}
    assert branch == {"organization_id": "org-id", "name": "Centro"}
