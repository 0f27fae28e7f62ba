"""
Tests for the User document model.
"""

from bson import ObjectId

from blogdb.models.user import User, WriteOutcome


class TestToDocument:
    """Tests for User.to_document."""

    def test_unsaved_user_has_no_id(self):
        """Test _id is omitted so the store generates one."""
        user = User(name="Nikola", age=30, blog="rubikscode.net", location="Beograd")

        assert user.to_document() == {
            "name": "Nikola",
            "blog": "rubikscode.net",
            "age": 30,
            "location": "Beograd",
        }

    def test_saved_user_keeps_id(self):
        """Test an assigned id is written as _id."""
        user_id = ObjectId()
        user = User(id=user_id, name="Vanja")

        document = user.to_document()

        assert document["_id"] == user_id
        assert "id" not in document


class TestFromDocument:
    """Tests for User.from_document."""

    def test_known_fields(self):
        """Test wire fields map onto model attributes."""
        user_id = ObjectId()

        user = User.from_document({
            "_id": user_id,
            "name": "Nikola",
            "blog": "rubikscode.net",
            "age": 30,
            "location": "Beograd",
        })

        assert user.id == user_id
        assert user.name == "Nikola"
        assert user.age == 30
        assert user.extra_fields == {}

    def test_ad_hoc_fields_are_kept(self):
        """Test fields added by updates survive the round through the model."""
        user = User.from_document({"_id": ObjectId(), "name": "Nikola", "address": "test address"})

        assert user.extra_fields == {"address": "test address"}
        assert user.to_document()["address"] == "test address"

    def test_partial_document(self):
        """Test documents missing declared fields still load."""
        user = User.from_document({"_id": ObjectId()})

        assert user.name is None
        assert user.age is None


def test_write_outcome_values():
    assert WriteOutcome.MODIFIED.value == "modified"
    assert WriteOutcome.UNCHANGED.value == "unchanged"
    assert WriteOutcome.NOT_FOUND.value == "not_found"


class TestMismatchedDocuments:
    """Tests for documents whose declared fields hold other types."""

    def test_string_age_is_kept_raw(self):
        """Test a non-integer age doesn't fail the read."""
        user_id = ObjectId()

        user = User.from_document({"_id": user_id, "name": "Nikola", "age": "thirty"})

        assert user.id == user_id
        assert user.name == "Nikola"
        assert user.age == "thirty"

    def test_int_name_is_kept_raw(self):
        """Test a non-string name is kept and written back unchanged."""
        user = User.from_document({"_id": ObjectId(), "name": 5, "address": "test address"})

        assert user.name == 5
        assert user.extra_fields == {"address": "test address"}
        assert user.to_document()["name"] == 5


class TestPartialDocuments:
    """Tests for users with unset declared fields."""

    def test_unset_fields_are_omitted(self):
        """Test None declared fields aren't written as nulls."""
        assert User(name="Nikola").to_document() == {"name": "Nikola"}

    def test_none_extra_field_is_kept(self):
        """Test only declared fields are dropped when None."""
        user = User.from_document({"_id": ObjectId(), "name": "Nikola", "address": None})

        assert user.to_document()["address"] is None
