"""Recovery guidance shown to scam victims."""

RECOVERY_STEPS = [
    {
        "title": "First 1 Hour: Immediate Action",
        "steps": [
            "Disconnect from the internet if malware is suspected.",
            "Change passwords for primary email and banking accounts.",
            "Contact your bank to freeze cards and report fraud.",
            "Enable Two-Factor Authentication (2FA) on all critical accounts.",
        ],
    },
    {
        "title": "Within 24 Hours: Reporting",
        "steps": [
            "File a report at cybercrime.gov.in (or your local portal).",
            "Gather all evidence: screenshots, transaction IDs, and call logs.",
            "Notify your mobile service provider if it was a SIM swap scam.",
            "Inform your contacts if your social media was compromised.",
        ],
    },
    {
        "title": "Long-term: Account Security",
        "steps": [
            "Monitor credit reports for unauthorized activity.",
            "Update security software on all devices.",
            "Review privacy settings on all social platforms.",
            "Educate yourself on the specific scam type to prevent recurrence.",
        ],
    },
]

HELPLINES = [
    {"name": "National Cyber Crime Helpline", "number": "1930", "desc": "Available 24/7 for immediate reporting."},
    {"name": "Police Emergency", "number": "112", "desc": "For immediate physical threat or local assistance."},
    {"name": "Women Helpline", "number": "1091", "desc": "Specialized support for online harassment."},
]


def recovery_guide():
    return {"phases": RECOVERY_STEPS, "helplines": HELPLINES}
