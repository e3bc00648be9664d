#!/usr/bin/env python3
"""
Development JSON data store for Ridepool.

Serves the collections of a JSON file over HTTP with the query and update
operations the Ridepool client uses.
"""

import json
import os
import threading
from uuid import uuid4

from flask import Flask, jsonify, request
from flask_cors import CORS

app = Flask(__name__)
CORS(app)

# Path to the JSON database file
DB_FILE = os.getenv("RIDEPOOL_DB_FILE", "data/db.json")

COLLECTIONS = ["users", "drivers", "rides", "bookings", "driver_reviews", "sos_alerts"]

# Fields that must be unique within a collection
UNIQUE_FIELDS = {
    "driver_reviews": ["booking_id"],
    "users": ["phone"],
}

# Serializes read-modify-write cycles on the JSON file
_db_lock = threading.Lock()


def empty_db():
    """An empty database with every collection present."""
    return {name: [] for name in COLLECTIONS}


def read_db():
    """Read the database from the JSON file."""
    with open(DB_FILE, 'r') as f:
        return json.load(f)


def write_db(data):
    """Write data to the JSON file."""
    with open(DB_FILE, 'w') as f:
        json.dump(data, f, indent=2)


def encode_value(value):
    """Text form used to compare stored values with query parameters."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def matches(item, params):
    """Check an item against equality (``field=v``) and inclusion (``field__in=a,b``) filters."""
    for key, value in params.items():
        if key.startswith("_"):
            continue
        if key.endswith("__in"):
            if encode_value(item.get(key[:-4])) not in value.split(","):
                return False
        elif key not in item or encode_value(item[key]) != value:
            return False
    return True


def sort_items(items, params):
    """Order items by ``_sort`` and ``_order`` parameters."""
    sort_key = params.get("_sort")
    if not sort_key:
        return items
    reverse = params.get("_order", "asc") == "desc"
    # None sorts first ascending
    return sorted(items, key=lambda i: (i.get(sort_key) is not None, i.get(sort_key) or ""),
                  reverse=reverse)


def find_conflict(collection, db, item):
    """Return the name of the unique field ``item`` would duplicate, if any."""
    for field in UNIQUE_FIELDS.get(collection, []):
        if item.get(field) is None:
            continue
        for existing in db[collection]:
            if existing.get(field) == item.get(field) and existing.get("id") != item.get("id"):
                return field
    return None


def collection_not_found(collection):
    return jsonify({"error": f"Collection '{collection}' not found"}), 404


@app.route('/')
def get_root():
    """Get the entire database."""
    return jsonify(read_db())


@app.route('/<collection>', methods=['GET', 'POST'])
def manage_collection(collection):
    """Get all items or add a new item to a collection."""
    with _db_lock:
        db = read_db()

        if collection not in db:
            return collection_not_found(collection)

        if request.method == 'GET':
            return jsonify(db[collection])

        new_item = request.json or {}
        new_item.setdefault("id", str(uuid4()))

        conflict = find_conflict(collection, db, new_item)
        if conflict:
            return jsonify({"error": f"Duplicate value for '{conflict}' in '{collection}'"}), 409

        db[collection].append(new_item)
        write_db(db)
        return jsonify(new_item), 201


@app.route('/<collection>/query', methods=['GET', 'PATCH'])
def query_collection(collection):
    """Query items in a collection, or update every matching item."""
    with _db_lock:
        db = read_db()

        if collection not in db:
            return collection_not_found(collection)

        params = request.args
        filtered_items = [item for item in db[collection] if matches(item, params)]

        if request.method == 'GET':
            return jsonify(sort_items(filtered_items, params))

        changes = request.json or {}
        changes.pop("id", None)
        for item in filtered_items:
            item.update(changes)
        write_db(db)
        return jsonify(filtered_items)


@app.route('/<collection>/<item_id>', methods=['GET', 'PUT', 'PATCH', 'DELETE'])
def manage_item(collection, item_id):
    """Get, replace, update or delete a specific item."""
    with _db_lock:
        db = read_db()

        if collection not in db:
            return collection_not_found(collection)

        item_index = None
        for i, item in enumerate(db[collection]):
            if str(item.get('id')) == str(item_id):
                item_index = i
                break

        if item_index is None:
            return jsonify({"error": f"Item with ID '{item_id}' not found in '{collection}'"}), 404

        if request.method == 'GET':
            return jsonify(db[collection][item_index])

        if request.method == 'DELETE':
            deleted_item = db[collection].pop(item_index)
            write_db(db)
            return jsonify(deleted_item)

        if request.method == 'PUT':
            updated_item = request.json or {}
        else:
            updated_item = dict(db[collection][item_index])
            updated_item.update(request.json or {})
        updated_item["id"] = db[collection][item_index]["id"]

        conflict = find_conflict(collection, db, updated_item)
        if conflict:
            return jsonify({"error": f"Duplicate value for '{conflict}' in '{collection}'"}), 409

        db[collection][item_index] = updated_item
        write_db(db)
        return jsonify(updated_item)


def ensure_db():
    """Create the database file with empty collections if it is missing."""
    db_dir = os.path.dirname(DB_FILE)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    if not os.path.exists(DB_FILE):
        write_db(empty_db())


if __name__ == '__main__':
    ensure_db()
    app.run(debug=True, host='0.0.0.0', port=int(os.getenv("PORT", "3000")))
