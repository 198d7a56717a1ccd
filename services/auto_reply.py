"""Keyword-matched canned replies for support tickets."""

from __future__ import annotations

from typing import Iterable, Tuple


# First matching rule wins; order matters where keywords overlap
REPLY_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (
        ("help", "how"),
        "Thanks for reaching out! We're here to help. Could you provide more details about "
        "what you need assistance with? Our team reviews all tickets and will get back to you shortly.",
    ),
    (
        ("bug", "error", "crash"),
        "Sorry to hear you're experiencing issues! Please describe: 1) What were you doing when it "
        "happened? 2) What error did you see? 3) What device/platform? This helps us fix it faster. "
        "Our team will investigate.",
    ),
    (
        ("price", "cost", "robux"),
        "Thanks for your interest! For pricing and product details, check our Shop section or wait "
        "for a staff member to respond with more info. We appreciate your support!",
    ),
    (
        ("account", "login", "password"),
        "Account security is important. For account issues, a staff member will review this shortly. "
        "Please don't share sensitive info here. We're on it!",
    ),
    (
        ("ban", "suspended", "kicked"),
        "We understand this is frustrating. A staff member will review your case and get back to you "
        "with details about your account status. Thanks for your patience.",
    ),
    (
        ("suggest", "idea", "feature"),
        "Love your enthusiasm! Feature suggestions are valuable. A staff member will check this out. "
        "We're always looking to improve the game!",
    ),
    (
        ("join", "gang", "team"),
        "Interested in joining? Check out our Gangs section to find one that fits you! A staff member "
        "is here if you have more questions. Good luck!",
    ),
    (
        ("event", "giveaway", "contest"),
        "Awesome! Check the Home section for active giveaways and events. A staff member can give you "
        "more details if needed. Don't miss out!",
    ),
    (
        ("thanks", "thank you"),
        "You're welcome! We appreciate your support and feedback. Let us know if there's anything "
        "else we can help with!",
    ),
)

DEFAULT_REPLY = (
    "Thanks for your message! We've received your ticket and a staff member will review it shortly. "
    "We appreciate your patience and will get back to you as soon as possible!"
)


def generate_reply(text: str, rules: Iterable[Tuple[Tuple[str, ...], str]] = REPLY_RULES) -> str:
    """Pick the canned reply for a user message."""
    lowered = (text or "").lower()
    for keywords, reply in rules:
        if any(keyword in lowered for keyword in keywords):
            return reply
    return DEFAULT_REPLY


def acknowledgement(subject: str) -> str:
    """Generic reply used when keyword replies are switched off."""
    return (
        f'Thank you for contacting us! We\'ve received your ticket: "{subject}". '
        "Our team will review your message and respond shortly. We appreciate your patience!"
    )
