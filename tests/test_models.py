"""
Tests for the Firestore data models.
"""
from datetime import datetime, timezone

from google.cloud import firestore

from dogmatch.models import User, Dog, DogLocation, Match, Message, Notification
from dogmatch.models.match import pair_key

CREATED = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestUser:
    """Tests for the User model."""

    def test_defaults(self):
        user = User(id="u1", email="a@example.com", name="Alice")
        assert user.preferences == {"notifications": True, "emailUpdates": False, "radius": 10}
        assert user.fcm_token is None

    def test_from_firestore_doc_merges_default_preferences(self):
        user = User.from_firestore_doc("u1", {
            "email": "a@example.com",
            "name": "Alice",
            "preferences": {"radius": 25},
        })
        assert user.preferences == {"notifications": True, "emailUpdates": False, "radius": 25}

    def test_to_dict_hides_push_token(self):
        user = User(id="u1", email="a@example.com", name="Alice", fcm_token="secret", created_at=CREATED)
        result = user.to_dict()
        assert "fcmToken" not in result
        assert result["id"] == "u1"
        assert result["createdAt"] == CREATED.isoformat()

    def test_firestore_document_has_no_id(self):
        doc = User(id="u1", email="a@example.com", name="Alice").to_firestore_document()
        assert "id" not in doc
        assert doc["email"] == "a@example.com"


class TestDogLocation:
    """Tests for the DogLocation model."""

    def test_to_dict_skips_empty_details(self):
        loc = DogLocation(latitude=40.7, longitude=-74.0)
        assert loc.to_dict() == {"latitude": 40.7, "longitude": -74.0}

    def test_to_dict_with_details(self):
        loc = DogLocation(40.7, -74.0, city="New York", region="NY", country="USA")
        assert loc.to_dict() == {
            "latitude": 40.7,
            "longitude": -74.0,
            "city": "New York",
            "region": "NY",
            "country": "USA",
        }

    def test_geopoint(self):
        point = DogLocation(40.7, -74.0).geopoint()
        assert isinstance(point, firestore.GeoPoint)
        assert point.latitude == 40.7
        assert point.longitude == -74.0


class TestDog:
    """Tests for the Dog model."""

    def _payload(self):
        return {
            "name": "Rex",
            "breed": "Labrador",
            "age": 3,
            "gender": "male",
            "description": "Friendly",
            "photos": ["gs://bucket/rex.jpg"],
            "traits": {"size": "large"},
        }

    def test_from_payload_keeps_optional_sections(self):
        dog = Dog.from_payload("owner1", self._payload(), DogLocation(40.7, -74.0))
        assert dog.owner_id == "owner1"
        assert dog.extras == {"traits": {"size": "large"}}

    def test_firestore_round_trip(self):
        dog = Dog.from_payload("owner1", self._payload(), DogLocation(40.7, -74.0, city="NYC"))
        dog.created_at = CREATED
        doc = dog.to_firestore_document()

        assert isinstance(doc["location"], firestore.GeoPoint)
        assert doc["locationDetails"]["city"] == "NYC"
        assert doc["traits"] == {"size": "large"}

        restored = Dog.from_firestore_doc("dog1", doc)
        assert restored.id == "dog1"
        assert restored.location == dog.location
        assert restored.extras == dog.extras

    def test_to_dict_converts_gs_photos(self):
        dog = Dog.from_payload("owner1", self._payload(), DogLocation(40.7, -74.0))
        result = dog.to_dict()
        assert result["photos"] == ["https://storage.googleapis.com/bucket/rex.jpg"]
        assert result["traits"] == {"size": "large"}
        assert "updatedAt" not in result

    def test_missing_location(self):
        dog = Dog.from_firestore_doc("dog1", {"ownerId": "o", "name": "Rex"})
        assert dog.location is None
        assert dog.to_dict()["location"] is None


class TestMatch:
    """Tests for the Match model."""

    def test_pair_key_is_order_independent(self):
        assert pair_key("b", "a") == pair_key("a", "b") == "a__b"

    def test_defaults_to_pending(self):
        match = Match(id="m1", dog1_id="d1", dog2_id="d2")
        assert match.status == "pending"
        assert match.dog_ids == ("d1", "d2")

    def test_firestore_document_carries_pair_key(self):
        doc = Match(id="m1", dog1_id="d2", dog2_id="d1", created_at=CREATED).to_firestore_document()
        assert doc["pairKey"] == "d1__d2"
        assert "notes" not in doc

    def test_to_dict_optional_fields(self):
        match = Match.from_firestore_doc("m1", {
            "dog1Id": "d1",
            "dog2Id": "d2",
            "status": "accepted",
            "notes": "Park on Sunday",
            "lastMessageAt": CREATED,
        })
        result = match.to_dict()
        assert result["status"] == "accepted"
        assert result["notes"] == "Park on Sunday"
        assert result["lastMessageAt"] == CREATED.isoformat()
        assert "matchPreferences" not in result


class TestMessage:
    """Tests for the Message model."""

    def test_unread_by_default(self):
        message = Message(id="", match_id="m1", sender_id="u1", content="Hi", created_at=CREATED)
        doc = message.to_firestore_document()
        assert doc["readAt"] is None
        assert "attachments" not in doc
        assert message.to_dict()["readAt"] is None

    def test_attachments_round_trip(self):
        attachment = {"type": "image", "url": "https://example.com/a.jpg", "name": "a.jpg"}
        message = Message.from_firestore_doc("msg1", {
            "matchId": "m1", "senderId": "u1", "content": "Look", "attachments": [attachment],
        })
        assert message.to_dict()["attachments"] == [attachment]


class TestNotification:
    """Tests for the Notification model."""

    def test_is_read(self):
        notification = Notification(id="n1", user_id="u1", type="message", title="t", body="b")
        assert not notification.is_read
        notification.read_at = CREATED
        assert notification.is_read

    def test_firestore_document_stores_explicit_null_read_at(self):
        doc = Notification(id="", user_id="u1", type="system", title="t", body="b").to_firestore_document()
        assert "readAt" in doc
        assert doc["readAt"] is None
        assert doc["data"] == {}
