"""
The doctor's weekly schedule shown on the staff dashboard.

The clinic API has no schedule endpoint, so the schedule starts from a fixed
week and its edits live in the staff member's browser session. Each day is a
dict with `day`, `time` ('8:00 AM - 5:00 PM', or '' when there are no hours),
and `status`.
"""
# clinic/schedule.py

import datetime

SCHEDULE_STATUSES = ('Available', 'Half-Day', 'Day-off', 'Unavailable')
TIME_FORMAT = '%I:%M %p'

DEFAULT_SCHEDULE = (
    {'day': 'Monday', 'time': '8:00 AM - 5:00 PM', 'status': 'Available'},
    {'day': 'Tuesday', 'time': '8:00 AM - 5:00 PM', 'status': 'Available'},
    {'day': 'Wednesday', 'time': '8:00 AM - 5:00 PM', 'status': 'Available'},
    {'day': 'Thursday', 'time': '8:00 AM - 5:00 PM', 'status': 'Available'},
    {'day': 'Friday', 'time': '8:00 AM - 5:00 PM', 'status': 'Available'},
    {'day': 'Saturday', 'time': '8:00 AM - 12:00 PM', 'status': 'Half-Day'},
    {'day': 'Sunday', 'time': '', 'status': 'Day-off'},
)

DEFAULT_NOTES = (
    'Doctor will be on leave April 25-26 (Medical Conference)',
    'Saturday Schedule may change next month',
)


def default_schedule():
    """Returns a fresh, editable copy of the default week."""
    return [dict(day) for day in DEFAULT_SCHEDULE]


def default_notes():
    return list(DEFAULT_NOTES)


def parse_hours(hours):
    """Splits a '8:00 AM - 5:00 PM' range into start and end times.

    Returns:
        tuple: (datetime.time, datetime.time), or (None, None) when the day
               has no hours or the text cannot be read.
    """
    start_text, sep, end_text = (hours or '').partition(' - ')
    if not sep:
        return None, None
    try:
        start = datetime.datetime.strptime(start_text.strip(), TIME_FORMAT).time()
        end = datetime.datetime.strptime(end_text.strip(), TIME_FORMAT).time()
    except ValueError:
        return None, None
    return start, end


def format_time(value):
    """Formats a time as '8:00 AM', without a leading zero on the hour."""
    modifier = 'PM' if value.hour >= 12 else 'AM'
    return f"{value.hour % 12 or 12}:{value.minute:02d} {modifier}"


def format_hours(start, end):
    return f"{format_time(start)} - {format_time(end)}"


def update_day(entry, status, start=None, end=None):
    """Sets a day's status and hours in place.

    A day off, or a day missing either time, is stored without hours.
    """
    if status not in SCHEDULE_STATUSES:
        raise ValueError(f"Unknown schedule status: {status}")
    entry['status'] = status
    if status == 'Day-off' or start is None or end is None:
        entry['time'] = ''
    else:
        entry['time'] = format_hours(start, end)
    return entry


def toggle_availability(entry):
    """Flips an Available day to Unavailable; any other status becomes Available."""
    entry['status'] = 'Unavailable' if entry['status'] == 'Available' else 'Available'
    return entry


def add_note(notes, text):
    """Appends a trimmed note. Blank notes are ignored.

    Returns:
        bool: True if a note was added.
    """
    text = (text or '').strip()
    if not text:
        return False
    notes.append(text)
    return True


def delete_note(notes, index):
    """Removes the note at `index`; out-of-range indexes are ignored."""
    if 0 <= index < len(notes):
        del notes[index]
