from flask import Blueprint, jsonify, request

from ..auth import login_required, current_user_id
from ..services.dog_service import DogService
from ..utils.validators import validate_dog_payload, validate_coordinates, validate_radius
from .helpers import json_body

dogs_bp = Blueprint('dogs', __name__, url_prefix='/api/dogs')


@dogs_bp.route('', methods=['POST'])
@login_required
def create_dog():
    payload = validate_dog_payload(json_body())
    dog = DogService().create_dog(current_user_id(), payload)
    return jsonify(dog.to_dict()), 201


@dogs_bp.route('', methods=['GET'])
@login_required
def list_my_dogs():
    dogs = DogService().list_owner_dogs(current_user_id())
    return jsonify([dog.to_dict() for dog in dogs]), 200


@dogs_bp.route('/nearby', methods=['GET'])
@login_required
def nearby_dogs():
    latitude, longitude = validate_coordinates(request.args.get('latitude'), request.args.get('longitude'))
    radius = validate_radius(request.args.get('radius'))
    return jsonify(DogService().find_nearby(current_user_id(), latitude, longitude, radius)), 200


@dogs_bp.route('/<dog_id>', methods=['GET'])
@login_required
def get_dog(dog_id):
    return jsonify(DogService().get_dog(dog_id).to_dict()), 200


@dogs_bp.route('/<dog_id>', methods=['PUT'])
@login_required
def update_dog(dog_id):
    changes = validate_dog_payload(json_body(), partial=True)
    dog = DogService().update_dog(dog_id, current_user_id(), changes)
    return jsonify(dog.to_dict()), 200


@dogs_bp.route('/<dog_id>', methods=['DELETE'])
@login_required
def delete_dog(dog_id):
    DogService().delete_dog(dog_id, current_user_id())
    return jsonify({"message": "Dog profile deleted successfully"}), 200
