"""
Input validation functions for the Dog Match application.

Every validator raises ValidationError(field, message) on bad input and
returns the cleaned value otherwise.
"""
import math
import re
from datetime import datetime
from typing import Any, Optional

from email_validator import validate_email, EmailNotValidError

from ..config import (
    MIN_PASSWORD_LENGTH, MIN_NAME_LENGTH, MAX_NAME_LENGTH,
    MIN_SEARCH_RADIUS_KM, MAX_SEARCH_RADIUS_KM,
    MIN_DOG_AGE, MAX_DOG_AGE, DOG_GENDERS, DOG_SIZES, LEVELS,
    MAX_PHOTOS, MAX_DESCRIPTION_LENGTH, DEFAULT_RADIUS_KM,
    MATCH_RESPONSES, MATCH_PURPOSES, MAX_NOTES_LENGTH,
    MAX_MESSAGE_LENGTH, MAX_ATTACHMENTS, ATTACHMENT_TYPES,
)
from ..exceptions import ValidationError
from .url_helpers import is_photo_url

PHONE_PATTERN = re.compile(r"^\+?[\d\s-]+$")
URL_PATTERN = re.compile(r"^https?://.+")


def require_json_object(data: Any) -> dict:
    if not isinstance(data, dict):
        raise ValidationError("body", "Request body must be a JSON object")
    return data


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_coordinates(lat: Any, lng: Any) -> tuple[float, float]:
    """
    Validate and convert latitude/longitude coordinates.

    Args:
        lat: Latitude as a number or numeric string
        lng: Longitude as a number or numeric string

    Returns:
        tuple: (latitude, longitude) as floats

    Raises:
        ValidationError: If coordinates are invalid
    """
    if lat is None or lng is None or lat == "" or lng == "":
        raise ValidationError("coordinates", "Latitude and longitude are required")

    if isinstance(lat, bool) or isinstance(lng, bool):
        raise ValidationError("coordinates", "Latitude and longitude must be numeric")

    try:
        lat_float = float(lat)
        lng_float = float(lng)
    except (ValueError, TypeError):
        raise ValidationError("coordinates", "Latitude and longitude must be numeric")

    if not (-90 <= lat_float <= 90):
        raise ValidationError("latitude", f"Latitude must be between -90 and 90, got {lat_float}")

    if not (-180 <= lng_float <= 180):
        raise ValidationError("longitude", f"Longitude must be between -180 and 180, got {lng_float}")

    return lat_float, lng_float


def validate_radius(radius: Any) -> float:
    """Search radius in km; defaults when omitted, any finite positive value is accepted."""
    if radius is None or radius == "":
        return float(DEFAULT_RADIUS_KM)

    try:
        radius_float = float(radius)
    except (ValueError, TypeError):
        raise ValidationError("radius", "Radius must be numeric")

    if not math.isfinite(radius_float) or radius_float <= 0:
        raise ValidationError("radius", "Radius must be a positive number of km")

    return radius_float


def validate_date(date_str: Optional[str], field: str = "date") -> str:
    """
    Validate date string in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate
        field: Field name reported in the error

    Returns:
        str: Validated date string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r'^\d{4}-\d{2}-\d{2}$', date_str):
        raise ValidationError(field, f"Date must be in YYYY-MM-DD format, got {date_str}")

    # Validate it's a real date
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
    except ValueError as e:
        raise ValidationError(field, f"Invalid date: {str(e)}")

    return date_str


def validate_text(value: Any, field: str, max_length: int,
                  min_length: int = 0, required: bool = False, strip: bool = True) -> str:
    """
    Validate a free-text field.

    With strip=False the text is kept and measured as sent; a whitespace-only
    value still counts as missing.

    Returns:
        str: Cleaned text (empty string if optional and missing)
    """
    if value is None:
        if required:
            raise ValidationError(field, f"{field} is required")
        return ""

    if not isinstance(value, str):
        raise ValidationError(field, f"{field} must be a string")

    if required and not value.strip():
        raise ValidationError(field, f"{field} is required")

    value = value.strip() if strip else value

    if len(value) > max_length:
        raise ValidationError(field, f"{field} exceeds maximum length of {max_length} characters")

    if value and len(value) < min_length:
        raise ValidationError(field, f"{field} must be at least {min_length} characters")

    return value


def validate_name(name: Any, field: str = "name") -> str:
    return validate_text(name, field, MAX_NAME_LENGTH, min_length=MIN_NAME_LENGTH, required=True)


def validate_email_address(email: Any) -> str:
    """Return the normalized form of a syntactically valid email address."""
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("email", "Email is required")

    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("email", f"Invalid email: {e}")

    return result.normalized


def validate_password(password: Any) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def validate_boolean(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(field, f"{field} must be a boolean")
    return value


def validate_choice(value: Any, field: str, choices: tuple) -> str:
    if value not in choices:
        raise ValidationError(field, f"{field} must be one of: {', '.join(choices)}")
    return value


def validate_registration(data: Any) -> dict:
    data = require_json_object(data)
    return {
        "email": validate_email_address(data.get("email")),
        "password": validate_password(data.get("password")),
        "name": validate_name(data.get("name")),
    }


def validate_login(data: Any) -> dict:
    data = require_json_object(data)
    password = data.get("password")
    if not isinstance(password, str) or not password:
        raise ValidationError("password", "Password is required")
    return {"email": validate_email_address(data.get("email")), "password": password}


def validate_preferences(preferences: Any) -> dict:
    """Validate a partial preferences object; only supplied keys are returned."""
    if not isinstance(preferences, dict):
        raise ValidationError("preferences", "Preferences must be an object")

    cleaned = {}
    for key in ("notifications", "emailUpdates"):
        if key in preferences:
            cleaned[key] = validate_boolean(preferences[key], f"preferences.{key}")

    if "radius" in preferences:
        radius = preferences["radius"]
        if not _is_number(radius) or not (MIN_SEARCH_RADIUS_KM <= radius <= MAX_SEARCH_RADIUS_KM):
            raise ValidationError(
                "preferences.radius",
                f"Radius must be between {MIN_SEARCH_RADIUS_KM} and {MAX_SEARCH_RADIUS_KM}",
            )
        cleaned["radius"] = radius

    return cleaned


def validate_profile_update(data: Any) -> dict:
    """
    Validate a partial user profile update.

    Only name, email, phoneNumber, photoURL and preferences may change.
    """
    data = require_json_object(data)
    cleaned = {}

    if "name" in data:
        cleaned["name"] = validate_name(data["name"])

    if "email" in data:
        cleaned["email"] = validate_email_address(data["email"])

    if "phoneNumber" in data:
        phone = data["phoneNumber"]
        if not isinstance(phone, str) or not PHONE_PATTERN.match(phone):
            raise ValidationError("phoneNumber", "Phone number may only contain digits, spaces, dashes and a leading +")
        cleaned["phoneNumber"] = phone.strip()

    if "photoURL" in data:
        photo_url = data["photoURL"]
        if not isinstance(photo_url, str) or not URL_PATTERN.match(photo_url):
            raise ValidationError("photoURL", "photoURL must be an http(s) URL")
        cleaned["photoURL"] = photo_url

    if "preferences" in data:
        cleaned["preferences"] = validate_preferences(data["preferences"])

    if not cleaned:
        raise ValidationError("body", "No updatable fields supplied")

    return cleaned


def validate_photos(photos: Any) -> list:
    if not isinstance(photos, list):
        raise ValidationError("photos", "Photos must be a list of URLs")

    if len(photos) > MAX_PHOTOS:
        raise ValidationError("photos", f"Maximum number of photos ({MAX_PHOTOS}) exceeded")

    for photo in photos:
        if not isinstance(photo, str) or not is_photo_url(photo):
            raise ValidationError("photos", f"Invalid photo URL: {photo}")

    return photos


def validate_location(location: Any, field: str = "location") -> dict:
    if not isinstance(location, dict):
        raise ValidationError(field, "Location must be an object with latitude and longitude")

    lat, lng = validate_coordinates(location.get("latitude"), location.get("longitude"))
    cleaned = {"latitude": lat, "longitude": lng}

    if location.get("address") is not None:
        cleaned["address"] = validate_text(location["address"], f"{field}.address", 200)

    return cleaned


def _validate_traits(traits: Any) -> dict:
    if not isinstance(traits, dict):
        raise ValidationError("traits", "Traits must be an object")

    cleaned = {}
    if "size" in traits:
        cleaned["size"] = validate_choice(traits["size"], "traits.size", DOG_SIZES)
    for key in ("energy", "friendliness"):
        if key in traits:
            cleaned[key] = validate_choice(traits[key], f"traits.{key}", LEVELS)
    return cleaned


def _validate_medical_info(info: Any) -> dict:
    if not isinstance(info, dict):
        raise ValidationError("medicalInfo", "medicalInfo must be an object")

    cleaned = {}
    for key in ("vaccinated", "neutered"):
        if key in info:
            cleaned[key] = validate_boolean(info[key], f"medicalInfo.{key}")
    if info.get("lastCheckup") is not None:
        cleaned["lastCheckup"] = validate_date(info["lastCheckup"], "medicalInfo.lastCheckup")
    return cleaned


def _validate_pedigree(pedigree: Any) -> dict:
    if not isinstance(pedigree, dict):
        raise ValidationError("pedigree", "pedigree must be an object")

    cleaned = {}
    if "hasDocuments" in pedigree:
        cleaned["hasDocuments"] = validate_boolean(pedigree["hasDocuments"], "pedigree.hasDocuments")
    if pedigree.get("registrationNumber") is not None:
        cleaned["registrationNumber"] = validate_text(
            pedigree["registrationNumber"], "pedigree.registrationNumber", 100)
    return cleaned


def _validate_availability(availability: Any) -> dict:
    if not isinstance(availability, dict):
        raise ValidationError("availability", "availability must be an object")

    cleaned = {}
    if "isAvailable" in availability:
        cleaned["isAvailable"] = validate_boolean(availability["isAvailable"], "availability.isAvailable")
    if availability.get("nextAvailableDate") is not None:
        cleaned["nextAvailableDate"] = validate_date(
            availability["nextAvailableDate"], "availability.nextAvailableDate")
    return cleaned


_DOG_OPTIONAL_OBJECTS = {
    "traits": _validate_traits,
    "medicalInfo": _validate_medical_info,
    "pedigree": _validate_pedigree,
    "availability": _validate_availability,
}


def validate_dog_payload(data: Any, partial: bool = False) -> dict:
    """
    Validate a dog profile payload.

    Args:
        data: Request JSON
        partial: When True only the supplied fields are validated (updates)

    Returns:
        dict: Cleaned fields. ownerId, id and timestamps in the input are ignored.

    Raises:
        ValidationError: If any field is invalid
    """
    data = require_json_object(data)
    cleaned = {}

    def wanted(key):
        return not partial or key in data

    if wanted("name"):
        cleaned["name"] = validate_name(data.get("name"))

    if wanted("breed"):
        cleaned["breed"] = validate_text(data.get("breed"), "breed", MAX_NAME_LENGTH, required=True)

    if wanted("age"):
        age = data.get("age")
        if not _is_number(age):
            raise ValidationError("age", "Age is required and must be a number")
        if not (MIN_DOG_AGE <= age <= MAX_DOG_AGE):
            raise ValidationError("age", f"Age must be between {MIN_DOG_AGE} and {MAX_DOG_AGE}, got {age}")
        cleaned["age"] = age

    if wanted("gender"):
        cleaned["gender"] = validate_choice(data.get("gender"), "gender", DOG_GENDERS)

    if wanted("location"):
        cleaned["location"] = validate_location(data.get("location"))

    if "description" in data:
        cleaned["description"] = validate_text(data["description"], "description", MAX_DESCRIPTION_LENGTH)
    elif not partial:
        cleaned["description"] = ""

    if "photos" in data:
        cleaned["photos"] = validate_photos(data["photos"])
    elif not partial:
        cleaned["photos"] = []

    for key, validator in _DOG_OPTIONAL_OBJECTS.items():
        if data.get(key) is not None:
            cleaned[key] = validator(data[key])

    if partial and not cleaned:
        raise ValidationError("body", "No updatable fields supplied")

    return cleaned


def validate_document_id(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, f"{field} is required")
    if "/" in value:
        raise ValidationError(field, f"{field} is not a valid id")
    return value.strip()


def validate_match_payload(data: Any) -> dict:
    data = require_json_object(data)
    dog1_id = validate_document_id(data.get("dog1Id"), "dog1Id")
    dog2_id = validate_document_id(data.get("dog2Id"), "dog2Id")

    if dog1_id == dog2_id:
        raise ValidationError("dog2Id", "A dog cannot be matched with itself")

    cleaned = {"dog1Id": dog1_id, "dog2Id": dog2_id}

    preferences = data.get("matchPreferences")
    if preferences is not None:
        if not isinstance(preferences, dict):
            raise ValidationError("matchPreferences", "matchPreferences must be an object")
        prefs = {"purpose": validate_choice(preferences.get("purpose"), "matchPreferences.purpose", MATCH_PURPOSES)}
        if preferences.get("preferredDate") is not None:
            prefs["preferredDate"] = validate_date(preferences["preferredDate"], "matchPreferences.preferredDate")
        if preferences.get("location") is not None:
            prefs["location"] = validate_location(preferences["location"], "matchPreferences.location")
        cleaned["matchPreferences"] = prefs

    if data.get("notes") is not None:
        cleaned["notes"] = validate_text(data["notes"], "notes", MAX_NOTES_LENGTH)

    return cleaned


def validate_match_status(data: Any) -> str:
    """Only a response to a pending request is accepted; 'pending' itself never is."""
    data = require_json_object(data)
    status = data.get("status")
    if status not in MATCH_RESPONSES:
        raise ValidationError("status", "Invalid match status")
    return status


def _validate_attachments(attachments: Any) -> list:
    if not isinstance(attachments, list):
        raise ValidationError("attachments", "attachments must be a list")

    if len(attachments) > MAX_ATTACHMENTS:
        raise ValidationError("attachments", f"At most {MAX_ATTACHMENTS} attachments are allowed")

    cleaned = []
    for attachment in attachments:
        if not isinstance(attachment, dict):
            raise ValidationError("attachments", "Each attachment must be an object")
        url = attachment.get("url")
        if not isinstance(url, str) or not is_photo_url(url):
            raise ValidationError("attachments.url", f"Invalid attachment URL: {url}")
        cleaned.append({
            "type": validate_choice(attachment.get("type"), "attachments.type", ATTACHMENT_TYPES),
            "url": url,
            "name": validate_text(attachment.get("name"), "attachments.name", 255, required=True),
        })
    return cleaned


def validate_message_payload(data: Any) -> dict:
    data = require_json_object(data)
    cleaned = {
        "matchId": validate_document_id(data.get("matchId"), "matchId"),
        "content": validate_text(data.get("content"), "content", MAX_MESSAGE_LENGTH,
                                 required=True, strip=False),
    }
    if data.get("attachments") is not None:
        cleaned["attachments"] = _validate_attachments(data["attachments"])
    return cleaned


def validate_fcm_token(data: Any) -> str:
    data = require_json_object(data)
    token = data.get("fcmToken")
    if not isinstance(token, str) or not token.strip():
        raise ValidationError("fcmToken", "FCM token is required")
    return token.strip()
