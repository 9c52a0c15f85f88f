"""
Newsroom Starter Template
=========================

A ready-to-run Flask application with all Newsroom modules enabled.

Run with:
    python app.py

Visit:
    http://localhost:5000/api/home     - Home page payload
    http://localhost:5000/api/content  - Content store snapshot
    http://localhost:5000/auth/signin  - Admin sign-in
"""

import logging

from flask import Flask, jsonify
from newsroom import Newsroom
from config import Config

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

# Create Flask app
app = Flask(__name__)
app.config.from_object(Config)

# Initialize Newsroom - this registers all modules automatically
newsroom = Newsroom(app, {'brand_name': 'My Newsroom'})


@app.route('/health')
def health():
    return jsonify({'status': 'ok', 'modules': newsroom.get_registered_modules()})


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Newsroom Starter Template")
    print("=" * 60)
    print("Home payload:    http://localhost:5000/api/home")
    print("Content store:   http://localhost:5000/api/content")
    print("Admin sign-in:   http://localhost:5000/auth/signin")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=5000, debug=True)
