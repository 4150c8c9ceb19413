# File: tests/integration/test_plan_cli.py
"""
Integration tests for the plan command-line entry point.
"""

import json
import pytest
from unittest.mock import patch

from scripts.plan import main


def write_request(tmp_path, payload, name="request.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding='utf-8')
    return str(path)


def run(capsys, *argv):
    code = main(list(argv))
    out = capsys.readouterr().out
    return code, (json.loads(out) if code == 0 else out)


class TestExpandCommand:

    def test_expand_weekly_template(self, tmp_path, capsys):
        request = write_request(tmp_path, {
            'templates': [{
                'id': 'gym',
                'title': 'Gym',
                'date': '2024-01-01',
                'startTime': '18:00',
                'endTime': '19:00',
                'recurrence': {'kind': 'weekly', 'interval': 1, 'exceptions': ['2024-01-08']},
                'location': 'Downtown',
            }],
            'windowStart': '2024-01-01',
            'windowEnd': '2024-01-21',
        })
        code, response = run(capsys, 'expand', request)

        assert code == 0
        assert [o['id'] for o in response['occurrences']] == ['gym_2024-01-01', 'gym_2024-01-15']
        assert response['occurrences'][0]['location'] == 'Downtown'
        assert response['truncated'] is False

    def test_invalid_rule_fails(self, tmp_path, capsys):
        request = write_request(tmp_path, {
            'templates': [{
                'id': 'bad',
                'title': 'Bad',
                'date': '2024-01-01',
                'recurrence': {'kind': 'daily', 'interval': 0},
            }],
            'windowStart': '2024-01-01',
            'windowEnd': '2024-01-07',
        })
        code, output = run(capsys, 'expand', request)
        assert code == 1
        assert output == ""

    @pytest.mark.parametrize("recurrence", [
        {'kind': 'daily', 'exceptions': [20240103]},
        {'kind': 'daily', 'endDate': 20240105},
        {'kind': 'daily', 'interval': 1.5},
    ])
    def test_malformed_rule_values_fail_cleanly(self, tmp_path, capsys, recurrence):
        request = write_request(tmp_path, {
            'templates': [{'id': 'r', 'title': 'R', 'date': '2024-01-01', 'recurrence': recurrence}],
            'windowStart': '2024-01-01',
            'windowEnd': '2024-01-07',
        })
        code, _ = run(capsys, 'expand', request)
        assert code == 1

    def test_numeric_template_date_fails_cleanly(self, tmp_path, capsys):
        request = write_request(tmp_path, {
            'templates': [{'id': 'r', 'title': 'R', 'date': 20240101}],
            'windowStart': '2024-01-01',
            'windowEnd': '2024-01-07',
        })
        code, _ = run(capsys, 'expand', request)
        assert code == 1

    def test_missing_window_fails(self, tmp_path, capsys):
        request = write_request(tmp_path, {'templates': []})
        code, _ = run(capsys, 'expand', request)
        assert code == 1


class TestLayoutCommand:

    def test_layout(self, tmp_path, capsys):
        request = write_request(tmp_path, {'events': [
            {'id': 'A', 'startTime': '09:00', 'endTime': '10:00'},
            {'id': 'B', 'startTime': '09:30', 'endTime': '10:30'},
            {'id': 'C', 'startTime': '10:00', 'endTime': '11:00'},
        ]})
        code, response = run(capsys, 'layout', request)

        assert code == 0
        assert response == {
            'A': {'columnIndex': 0, 'totalColumns': 2},
            'B': {'columnIndex': 1, 'totalColumns': 2},
            'C': {'columnIndex': 0, 'totalColumns': 2},
        }

    def test_zero_length_event_fails(self, tmp_path, capsys):
        request = write_request(tmp_path, {'events': [
            {'id': 'A', 'startTime': '09:00', 'endTime': '09:00'},
        ]})
        code, _ = run(capsys, 'layout', request)
        assert code == 1


class TestSuggestCommand:

    def test_suggest(self, tmp_path, capsys):
        request = write_request(tmp_path, {
            'items': [
                {'id': 'r', 'title': 'Report', 'durationMinutes': 60, 'priority': 'high', 'deadline': '2024-01-02'},
            ],
            'dayWindow': {'start': '09:00', 'end': '18:00'},
            'fixedEvents': [{'date': '2024-01-01', 'id': 'standup', 'startTime': '09:00', 'endTime': '10:00'}],
            'today': '2024-01-01',
        })
        code, response = run(capsys, 'suggest', request)

        assert code == 0
        placement = response['placements'][0]
        assert placement['date'] == '2024-01-01'
        assert placement['startTime'] == '10:00'
        assert placement['endTime'] == '11:00'
        assert response['conflicts'] == []
        assert response['summary']['totalHours'] == 1.0

    @pytest.mark.parametrize("duration", [None, [30], "half an hour"])
    def test_malformed_duration_fails_cleanly(self, tmp_path, capsys, duration):
        request = write_request(tmp_path, {
            'items': [{'id': 'a', 'title': 'A', 'durationMinutes': duration}],
            'today': '2024-01-01',
        })
        code, output = run(capsys, 'suggest', request)
        assert code == 1
        assert output == ""

    def test_numeric_deadline_fails_cleanly(self, tmp_path, capsys):
        request = write_request(tmp_path, {
            'items': [{'id': 'a', 'title': 'A', 'durationMinutes': 30, 'deadline': 20240102}],
            'today': '2024-01-01',
        })
        code, _ = run(capsys, 'suggest', request)
        assert code == 1

    def test_defaults_to_configured_window(self, tmp_path, capsys):
        request = write_request(tmp_path, {
            'items': [{'id': 'a', 'title': 'A', 'durationMinutes': 30}],
            'today': '2024-01-01',
        })
        code, response = run(capsys, 'suggest', request)
        assert code == 0
        assert response['placements'][0]['startTime'] == '09:00'


class TestErrors:

    def test_missing_file(self, tmp_path, capsys):
        code, _ = run(capsys, 'layout', str(tmp_path / 'absent.json'))
        assert code == 1

    def test_malformed_json(self, tmp_path, capsys):
        path = tmp_path / 'broken.json'
        path.write_text("{not json", encoding='utf-8')
        code, _ = run(capsys, 'layout', str(path))
        assert code == 1

    @patch('calendar_engine.core.config_manager.Config.validate', return_value=False)
    def test_invalid_configuration(self, mock_validate, tmp_path, capsys):
        request = write_request(tmp_path, {'events': []})
        code, _ = run(capsys, 'layout', request)
        assert code == 1
        assert mock_validate.called

    def test_unknown_command(self, tmp_path):
        with pytest.raises(SystemExit):
            main(['explode', str(tmp_path / 'request.json')])
