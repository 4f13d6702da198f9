"""
Input validation for the portal's forms.

Each validator takes the submitted values and returns a dictionary mapping a
field name to an error message. An empty dictionary means the input is valid.
"""
# clinic/forms.py

import re

EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')
STRICT_EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^[0-9+\-\s()]+$')

REGISTRATION_STEPS = 4


def _blank(value):
    return not str(value or '').strip()


def validate_email(email):
    """Validates an email address the way the forgot-password panel does."""
    if _blank(email):
        return {'email': 'Email is required.'}
    if not STRICT_EMAIL_PATTERN.match(email.strip()):
        return {'email': 'Enter a valid email.'}
    return {}


def validate_login(email, password):
    errors = {}
    if _blank(email):
        errors['email'] = 'Email is required'
    if _blank(password):
        errors['password'] = 'Password is required'
    return errors


def is_strong_password(password):
    """Checks for at least 8 characters with lowercase, uppercase, and a digit."""
    if len(password) < 8:
        return False
    has_upper = any(c.isupper() for c in password)
    has_lower = any(c.islower() for c in password)
    has_digit = any(c.isdigit() for c in password)
    return has_upper and has_lower and has_digit


def validate_patient_step(step, form):
    """Validates one step of the four-step patient registration.

    Args:
        step (int): 1 personal details, 2 emergency contact, 3 address, 4 terms.
        form (dict): The registration values collected so far.

    Returns:
        dict: Field errors for the given step.
    """
    errors = {}
    if step == 1:
        if _blank(form.get('firstName')):
            errors['firstName'] = 'First name is required'
        if _blank(form.get('lastName')):
            errors['lastName'] = 'Last name is required'
        email = form.get('email', '')
        if _blank(email):
            errors['email'] = 'Email is required'
        elif not EMAIL_PATTERN.search(email):
            errors['email'] = 'Please enter a valid email address'
        phone = form.get('phone', '')
        if _blank(phone):
            errors['phone'] = 'Phone number is required'
        elif not PHONE_PATTERN.match(phone):
            errors['phone'] = 'Please enter a valid phone number'
        password = form.get('password', '')
        if _blank(password):
            errors['password'] = 'Password is required'
        elif len(password) < 8:
            errors['password'] = 'Password must be at least 8 characters'
        elif not is_strong_password(password):
            errors['password'] = 'Password must contain uppercase, lowercase, and number'
        confirm = form.get('confirmPassword', '')
        if _blank(confirm):
            errors['confirmPassword'] = 'Please confirm your password'
        elif password != confirm:
            errors['confirmPassword'] = 'Passwords do not match'
        if not form.get('dateOfBirth'):
            errors['dateOfBirth'] = 'Date of birth is required'
        if not form.get('gender'):
            errors['gender'] = 'Gender is required'
    elif step == 2:
        if _blank(form.get('emergencyContactName')):
            errors['emergencyContactName'] = 'Emergency contact name is required'
        if _blank(form.get('emergencyContactRelationship')):
            errors['emergencyContactRelationship'] = 'Relationship is required'
        phone = form.get('emergencyContactPhone1', '')
        if _blank(phone):
            errors['emergencyContactPhone1'] = 'Primary phone is required'
        elif not PHONE_PATTERN.match(phone):
            errors['emergencyContactPhone1'] = 'Please enter a valid phone number'
    elif step == 3:
        if _blank(form.get('streetAddress')):
            errors['streetAddress'] = 'Street address is required'
        if _blank(form.get('barangay')):
            errors['barangay'] = 'Barangay is required'
        if _blank(form.get('municipality')):
            errors['municipality'] = 'Municipality is required'
    elif step == 4:
        if not form.get('agreeToTerms'):
            errors['agreeToTerms'] = 'You must agree to the terms and conditions'
    return errors


def registration_payload(form):
    """Strips the confirmation and consent fields before the form is submitted."""
    return {k: v for k, v in form.items() if k not in ('confirmPassword', 'agreeToTerms')}


def validate_staff_registration(form):
    errors = {}
    for field, label in (('firstName', 'First name'), ('lastName', 'Last name')):
        if _blank(form.get(field)):
            errors[field] = f'{label} is required'
    email = form.get('email', '')
    if _blank(email):
        errors['email'] = 'Email is required'
    elif not EMAIL_PATTERN.search(email):
        errors['email'] = 'Email is invalid'
    if _blank(form.get('phone')):
        errors['phone'] = 'Phone number is required'
    password = form.get('password', '')
    if _blank(password):
        errors['password'] = 'Password is required'
    elif len(password) < 6:
        errors['password'] = 'Password must be at least 6 characters'
    if not form.get('dateOfBirth'):
        errors['dateOfBirth'] = 'Date of birth is required'
    required = (
        ('emergencyContactName', 'Emergency contact name is required'),
        ('emergencyContactRelationship', 'Emergency contact relationship is required'),
        ('emergencyContactPhone1', 'Emergency contact phone is required'),
        ('streetAddress', 'Street address is required'),
        ('barangay', 'Barangay is required'),
        ('municipality', 'Municipality is required'),
    )
    for field, message in required:
        if _blank(form.get(field)):
            errors[field] = message
    return errors


def validate_staff_account(form, require_password=True):
    """Validates the admin's create/edit staff form."""
    errors = {}
    for field in ('firstName', 'lastName', 'email'):
        if _blank(form.get(field)):
            errors[field] = 'Required'
    if require_password and _blank(form.get('password')):
        errors['password'] = 'Required'
    return errors


def validate_service(service_name, price, description):
    errors = {}
    if _blank(service_name):
        errors['serviceName'] = 'Service name is required'
    try:
        if float(price) < 0:
            errors['price'] = 'Price cannot be negative'
    except (TypeError, ValueError):
        errors['price'] = 'Price must be a number'
    if _blank(description):
        errors['description'] = 'Description is required'
    return errors


def validate_feedback(rating, comment):
    errors = {}
    try:
        if not 1 <= int(rating) <= 5:
            errors['rating'] = 'Rating must be between 1 and 5'
    except (TypeError, ValueError):
        errors['rating'] = 'Rating must be between 1 and 5'
    if _blank(comment):
        errors['comment'] = 'Please provide a comment for your feedback'
    return errors


def validate_reminder(patient_id, reminder_date, reminder_time, message):
    if not patient_id or not reminder_date or not reminder_time or _blank(message):
        return {'form': 'Please fill in all required fields'}
    return {}


def validate_reschedule(preferred_datetime, symptom):
    if not preferred_datetime or _blank(symptom):
        return {'form': 'Please fill in all required fields'}
    return {}


def validate_walk_in(form):
    if (_blank(form.get('firstName')) or _blank(form.get('lastName'))
            or _blank(form.get('phone')) or not form.get('dateOfBirth')):
        return {'form': 'Please fill in all required fields'}
    return {}


def validate_new_password(token, password, confirm):
    """Validates the reset-password form: 8+ characters with letters and a digit."""
    if not token:
        return {'token': 'Missing token.'}
    if not password or not confirm:
        return {'password': 'Fill in all fields.'}
    if password != confirm:
        return {'confirm': 'Passwords do not match.'}
    if len(password) < 8 or not any(c.isalpha() for c in password) or not any(c.isdigit() for c in password):
        return {'password': 'Password must be 8+ chars and include a number.'}
    return {}
