"""
People API Routes
Registry of staff, vendors and guests used for autocomplete in the shift log
"""
from datetime import timedelta
import logging

from flask import Blueprint, request, jsonify, current_app

from verivault.models import Person, PERSON_TYPES
from verivault.stores import get_stores
from verivault.utils.decorators import get_current_username
from verivault.utils.timeutil import now_iso, parse_iso, utc_now

logger = logging.getLogger(__name__)

people_bp = Blueprint('people', __name__, url_prefix='/api/people')


def _sorted_by_name(people):
    return sorted(people, key=lambda p: p.full_name.lower())


@people_bp.route('', methods=['GET'])
def list_people():
    """
    List people

    Query params:
        search: name, company or department (case-insensitive)
        type: Staff, Vendor, Guest or all
        limit: max results
    """
    try:
        search = (request.args.get('search') or '').strip()
        person_type = request.args.get('type')
        limit = request.args.get('limit', type=int)

        people = get_stores().people.all()
        if search:
            people = [p for p in people if p.matches(search)]
        if person_type and person_type != 'all':
            people = [p for p in people if p.type == person_type]

        people = _sorted_by_name(people)
        if limit:
            people = people[:limit]

        return jsonify({
            'success': True,
            'people': [p.to_dict() for p in people],
            'total': len(people)
        })

    except Exception as e:
        logger.error(f"Error listing people: {e}", exc_info=True)
        error_msg = 'Failed to list people' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@people_bp.route('', methods=['POST'])
def create_person():
    """Add a person; name plus type must be unique"""
    try:
        data = request.get_json(silent=True) or {}
        first_name = (data.get('firstName') or '').strip()
        last_name = (data.get('lastName') or '').strip()
        person_type = data.get('type')

        if not first_name or not last_name or not person_type:
            return jsonify({
                'success': False,
                'message': 'First name, last name, and type are required'
            }), 400

        if person_type not in PERSON_TYPES:
            return jsonify({
                'success': False,
                'message': f'Invalid type. Must be one of: {", ".join(PERSON_TYPES)}'
            }), 400

        people = get_stores().people
        existing = people.first(lambda p: (
            p.first_name.lower() == first_name.lower()
            and p.last_name.lower() == last_name.lower()
            and p.type == person_type
        ))
        if existing:
            return jsonify({
                'success': False,
                'message': 'Person with this name and type already exists',
                'existingPerson': existing.to_dict()
            }), 409

        person = people.add(Person(
            first_name=first_name,
            last_name=last_name,
            type=person_type,
            company=data.get('company') or None,
            department=data.get('department') or None,
            phone=data.get('phone') or None,
            added_by=data.get('addedBy') or get_current_username(default='unknown'),
        ))

        logger.info(f"Person added: {person.full_name} ({person.type})")
        return jsonify({
            'success': True,
            'message': f'{person_type} added successfully',
            'person': person.to_dict()
        }), 201

    except Exception as e:
        logger.error(f"Error creating person: {e}", exc_info=True)
        error_msg = 'Failed to add person' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@people_bp.route('/<int:person_id>', methods=['GET'])
def get_person(person_id):
    person = get_stores().people.get(person_id)
    if not person:
        return jsonify({'success': False, 'message': 'Person not found'}), 404
    return jsonify({'success': True, 'person': person.to_dict()})


@people_bp.route('/<int:person_id>', methods=['PUT'])
def update_person(person_id):
    """Shallow-merge the body onto the person"""
    try:
        data = request.get_json(silent=True) or {}
        if data.get('type') and data['type'] not in PERSON_TYPES:
            return jsonify({
                'success': False,
                'message': f'Invalid type. Must be one of: {", ".join(PERSON_TYPES)}'
            }), 400

        changes = dict(data)
        changes['updatedAt'] = now_iso()
        changes['updatedBy'] = data.get('updatedBy') or get_current_username(default='unknown')

        person = get_stores().people.update(person_id, changes)
        if not person:
            return jsonify({'success': False, 'message': 'Person not found'}), 404

        return jsonify({
            'success': True,
            'message': 'Person updated successfully',
            'person': person.to_dict()
        })

    except Exception as e:
        logger.error(f"Error updating person {person_id}: {e}", exc_info=True)
        error_msg = 'Failed to update person' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@people_bp.route('/<int:person_id>', methods=['DELETE'])
def delete_person(person_id):
    person = get_stores().people.delete(person_id)
    if not person:
        return jsonify({'success': False, 'message': 'Person not found'}), 404

    logger.info(f"Person deleted: {person.full_name}")
    return jsonify({
        'success': True,
        'message': 'Person deleted successfully',
        'deletedPerson': person.to_dict()
    })


@people_bp.route('/stats/summary', methods=['GET'])
def people_stats():
    people = get_stores().people.all()
    week_ago = utc_now() - timedelta(days=7)

    recently_added = 0
    for person in people:
        added = parse_iso(person.added_at)
        if added and added >= week_ago:
            recently_added += 1

    return jsonify({
        'success': True,
        'stats': {
            'total': len(people),
            'staff': len([p for p in people if p.type == 'Staff']),
            'vendors': len([p for p in people if p.type == 'Vendor']),
            'guests': len([p for p in people if p.type == 'Guest']),
            'recentlyAdded': recently_added
        }
    })


@people_bp.route('/search/<path:query>', methods=['GET'])
def search_people(query):
    """Autocomplete search"""
    limit = request.args.get('limit', 10, type=int)
    matches = _sorted_by_name(get_stores().people.find(lambda p: p.matches(query)))[:limit]

    return jsonify({
        'success': True,
        'results': [p.to_search_result() for p in matches],
        'total': len(matches),
        'query': query
    })
