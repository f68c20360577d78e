from fittrack.services.validation import rep_numbers, sanitize_list, sanitize_text, validate_program


def test_sanitize_text_strips_markup():
    assert sanitize_text("  <b>Push Day</b> ") == "bPush Day/b"
    assert sanitize_text("javascript:alert(1)") == "alert(1)"
    assert sanitize_text('img onerror=x') == "img x"
    assert sanitize_text(None) is None


def test_sanitize_list_drops_empty_entries():
    assert sanitize_list([" chest ", "<>", "triceps"]) == ["chest", "triceps"]


def test_rep_numbers():
    assert rep_numbers("8-12") == [8, 12]
    assert rep_numbers("5/3/1") == [5, 3, 1]
    assert rep_numbers(10) == [10]
    assert rep_numbers("AMRAP") == []


def program(**overrides):
    data = {
        "name": "Full Body",
        "workouts": [{"name": "Day A", "exercises": [{"name": "Squat", "sets": 5, "reps": "5"}]}],
    }
    data.update(overrides)
    return data


def test_valid_program():
    assert validate_program(program()) == []


def test_program_errors():
    errors = validate_program(program(name=" ", workouts=[]))
    assert "Program name is required" in errors
    assert "Program must have at least one workout" in errors


def test_exercise_errors():
    errors = validate_program(
        program(workouts=[{"name": "Day A", "exercises": [{"name": "Squat", "sets": 0, "reps": "AMRAP"}]}])
    )
    assert 'Exercise "Squat" must have at least 1 set' in errors
    assert 'Exercise "Squat" must have at least 1 rep' in errors


def test_empty_workout():
    errors = validate_program(program(workouts=[{"name": "Day A", "exercises": []}]))
    assert errors == ['Workout "Day A" must have at least one exercise']
