#!/usr/bin/env python3
"""
NeoRoutine CLI - check tasks and read insights from the terminal
"""
import json
import os
import requests
from typing import Any, Dict, List, Optional

from neoroutine.core.config import settings
from neoroutine.core.exceptions import ApiEnvelopeError
from neoroutine.models.envelope import decode_envelope

# Backend API base URL
API_BASE = settings.API_BASE_URL

# User the CLI acts for
USER_ID = os.getenv("NEOROUTINE_USER_ID", "")

HELP_TEXT = """Commands:
  today                              today's and this week's progress
  check <routine_id> <task_id> [date] mark a task done
  uncheck <routine_id> <task_id> [date]
  badges                             earned badges
  seen                               mark all badges as seen
  insights [days]                    insight summary (default 30 days)
  remind                             adaptive reminder for the last 7 days
  quit"""


def api_request(method: str, path: str, **kwargs) -> Any:
    """
    Call the API and unwrap its response envelope

    Raises:
        ApiEnvelopeError: If the API reports a failure
        requests.RequestException: If the request cannot be made
    """
    headers = kwargs.pop("headers", {})
    if USER_ID:
        headers["X-User-Id"] = USER_ID

    response = requests.request(method, f"{API_BASE}{path}", headers=headers, timeout=10, **kwargs)
    try:
        payload = response.json()
    except ValueError:
        raise ApiEnvelopeError(f"HTTP {response.status_code}: invalid JSON", response.status_code)
    return decode_envelope(payload, response.status_code)


def cmd_today() -> str:
    """Show today's status"""
    data = api_request("GET", "/checkins/today")
    today = data["stats"]["today"]
    weekly = data["stats"]["weekly"]

    lines = [f"{data['date']}: {today['completed']}/{today['total']} tasks ({today['percent']}%)"]
    lines.append("  " + "  ".join(f"{d['day']} {d['percent']}%" for d in weekly["data"]))
    lines.append(f"  Week: {weekly['percent']}%")
    lines.append(f"  {data['micro_message']}")
    return "\n".join(lines)


def cmd_check(routine_id: str, task_id: str, date_iso: Optional[str] = None) -> str:
    """Mark a task as completed"""
    payload = {"routine_id": routine_id, "task_id": task_id}
    if date_iso:
        payload["date_iso"] = date_iso
    data = api_request("POST", "/checkins", json=payload)

    if not data.get("created"):
        return "Task already completed for this day"

    if data.get("today_percent") is None:
        lines = ["✓ Checked"]
    else:
        lines = [f"✓ Checked ({data['today_percent']}% today)"]
    for badge in data.get("new_badges", []):
        definition = badge.get("definition") or {}
        lines.append(f"  {definition.get('icon', '🏅')} New badge: {definition.get('name', badge['badge_id'])}")
    return "\n".join(lines)


def cmd_uncheck(routine_id: str, task_id: str, date_iso: Optional[str] = None) -> str:
    """Remove a check-in"""
    payload = {"routine_id": routine_id, "task_id": task_id}
    if date_iso:
        payload["date_iso"] = date_iso
    data = api_request("DELETE", "/checkins", json=payload)
    return f"Unchecked for {data['date']}"


def cmd_badges() -> str:
    """List earned badges"""
    data = api_request("GET", "/badges")
    badges: List[Dict[str, Any]] = data.get("badges", [])
    if not badges:
        return "No badges yet"

    lines = [f"{data['count']} badge(s), {data['unseen_count']} new"]
    for badge in badges:
        definition = badge.get("definition") or {}
        marker = " *" if not badge.get("seen") else ""
        lines.append(f"  {definition.get('icon', '')} {definition.get('name', badge['badge_id'])}{marker}")
    return "\n".join(lines)


def cmd_seen() -> str:
    data = api_request("PATCH", "/badges/seen", json={})
    return f"Marked {data['updated']} badge(s) as seen"


def cmd_insights(days: int = 30) -> str:
    """Show the insight summary"""
    data = api_request("GET", "/insights/user", params={"range": days})
    summary = data["summary"]

    lines = [
        f"Last {data['range_days']} days: {summary['total_check_ins']} check-ins, "
        f"{summary['days_with_activity']} active days",
        f"  Streak: {summary['current_streak']} (best {summary['longest_streak']})",
        f"  This week: {data['weekly']['message']}",
    ]
    for insight in data["insights"]:
        lines.append(f"  {insight['icon']} {insight['title']}: {insight['description']}")
    return "\n".join(lines)


def cmd_remind() -> str:
    data = api_request("GET", "/reminders/adaptive")
    return f"[{data['intensity']}] {data['message']}"


def run_command(line: str) -> str:
    """Route a command line to its handler"""
    parts = line.split()
    name, args = parts[0].lower(), parts[1:]

    if name == "today":
        return cmd_today()
    elif name == "check" and len(args) in (2, 3):
        return cmd_check(*args)
    elif name == "uncheck" and len(args) in (2, 3):
        return cmd_uncheck(*args)
    elif name == "badges":
        return cmd_badges()
    elif name == "seen":
        return cmd_seen()
    elif name == "insights":
        return cmd_insights(int(args[0]) if args else 30)
    elif name == "remind":
        return cmd_remind()
    elif name == "raw" and args:
        return json.dumps(api_request("GET", args[0]), indent=2)
    else:
        return HELP_TEXT


def main():
    """Main CLI loop"""
    print("💧 NeoRoutine CLI")
    print(f"Connected to: {API_BASE}")
    if not USER_ID:
        print("⚠ NEOROUTINE_USER_ID is not set; most commands will be rejected")
    print("Type 'help' for commands, 'quit' to leave\n")

    while True:
        try:
            user_input = input("> ").strip()

            if not user_input:
                continue

            if user_input.lower() in ("quit", "exit", "q"):
                break

            print(run_command(user_input))
            print()

        except (KeyboardInterrupt, EOFError):
            print()
            break
        except ApiEnvelopeError as e:
            print(f"❌ {e}\n")
        except requests.RequestException as e:
            print(f"❌ Could not reach the API: {e}\n")
        except ValueError as e:
            print(f"❌ {e}\n")


if __name__ == "__main__":
    main()
