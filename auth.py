from functools import wraps
from flask import session, redirect, url_for


def login_required(f):
    """Decorator to require login for certain routes"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        # Redirect only; anonymous visitors must not get a stored session
        if 'user_id' not in session:
            return redirect(url_for('main.login'))
        return f(*args, **kwargs)
    return decorated_function


def guest_only(f):
    """Decorator keeping logged-in users off the signup and login pages"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' in session:
            return redirect(url_for('main.dashboard'))
        return f(*args, **kwargs)
    return decorated_function
