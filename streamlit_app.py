import pandas as pd
import streamlit as st

from gateway import GeminiGateway
from guidance import recovery_guide
from presentation import View, Workspace

# Page config
st.set_page_config(
    page_title="CyberGuard | Cyber Safety Dashboard",
    page_icon="🛡️",
    layout="wide",
    initial_sidebar_state="expanded"
)

NAV_LABELS = {
    View.dashboard: "Dashboard",
    View.website_scan: "Website Detection",
    View.audio_scan: "Audio Detection",
    View.intelligence: "Threat Intelligence",
    View.recovery: "Support & Recovery",
    View.chat: "Support Chatbot",
}

# Initialize session state
if 'workspace' not in st.session_state:
    st.session_state.workspace = Workspace(GeminiGateway())

ws: Workspace = st.session_state.workspace


def show_dashboard():
    summary = ws.dashboard()
    st.title("Dashboard")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Detections Today", summary["today"])
    col2.metric("Total Detections", summary["total"])
    col3.metric("Average Risk", f"{summary['average_risk']}%")
    col4.metric("Risk Level", summary["risk_level"])

    st.subheader("Recent Incidents")
    if not summary["recent"]:
        st.info("No incidents recorded yet.")
    for incident in summary["recent"]:
        st.markdown(f"**{incident['target']}** · {incident['type']} · {incident['riskScore']}% Risk")

    if summary["failed_writes"]:
        st.subheader("Not saved")
        st.caption("These detections could not be stored and exist only in this session.")
        for incident in summary["failed_writes"]:
            st.warning(f"{incident['target']} · {incident['riskScore']}% Risk · {', '.join(incident['patterns'])}")


def show_website_scan():
    st.title("Fake Website Detection")
    form = ws.forms[View.website_scan]
    with st.form("website_form"):
        url = st.text_input("Suspicious URL", value=form.text, placeholder="https://example-bank-login.com")
        submitted = st.form_submit_button("Analyze", disabled=form.busy)
    if submitted:
        with st.spinner("Analyzing..."):
            ws.submit_website(url)

    if form.error:
        st.error(form.error)
    verdict = form.verdict
    if verdict is not None:
        show = {"Safe": st.success, "Suspicious": st.warning, "Fake": st.error}[verdict.status]
        show(f"{verdict.status} · Risk score {verdict.risk_score}/100")
        st.write(verdict.details)
        for reason in verdict.reasons:
            st.markdown(f"- {reason}")


def show_audio_scan():
    st.title("Live Call Scam Detection")
    form = ws.forms[View.audio_scan]

    col1, col2 = st.columns(2)
    if col1.button("Stop listening" if ws.recording else "Start listening"):
        if ws.recording:
            ws.stop_recording()
        else:
            ws.start_recording()

    # Speech capture runs in the browser; the text area receives its transcript
    transcript = st.text_area("Call transcript", value=form.text, height=200)
    if transcript != form.text:
        form.text = transcript

    if col2.button("Analyze now", disabled=form.busy):
        with st.spinner("Analyzing..."):
            ws.analyze_transcript()

    if form.error:
        st.error(form.error)
    verdict = form.verdict
    if verdict is not None:
        if verdict.is_scam:
            st.error(f"Likely scam · {verdict.scam_probability}% probability")
        else:
            st.success(f"No scam detected · {verdict.scam_probability}% probability")
        st.write(verdict.explanation)
        for alert in verdict.alerts:
            st.markdown(f"- {alert}")


def show_intelligence():
    st.title("Central Intelligence")
    if st.button("Refresh Feed"):
        ws.refresh()
    report = ws.intelligence()

    col1, col2 = st.columns([2, 1])
    with col1:
        st.subheader("Attack Vector Trends")
        trend = pd.DataFrame(report["trend"]).set_index("name")
        st.area_chart(trend["attempts"])

        st.subheader("Honeypot Live Logs")
        events = report["honeypot"]["events"]
        if not events:
            st.info("Waiting for attacker interaction...")
        for event in events:
            with st.expander(f"{event['scam_type']} · {event['timestamp']}"):
                st.json(event["intel"])
    with col2:
        st.subheader("Threat Distro")
        distribution = pd.DataFrame(report["distribution"]).set_index("name")
        st.bar_chart(distribution["value"])
        st.metric("Patterns Extracted", report["patterns_extracted"])
        for item in report["top_patterns"]:
            st.markdown(f"- {item['pattern']} ({item['count']})")


def show_recovery():
    st.title("Support & Recovery")
    guide = recovery_guide()
    for phase in guide["phases"]:
        st.subheader(phase["title"])
        for i, step in enumerate(phase["steps"], 1):
            st.markdown(f"{i}. {step}")
    st.subheader("Helplines")
    for line in guide["helplines"]:
        st.markdown(f"**{line['name']}**: {line['number']} · {line['desc']}")


def show_chat():
    st.title("CyberGuard Support")
    form = ws.forms[View.chat]
    for turn in ws.chat:
        with st.chat_message(turn.role):
            st.markdown(turn.content)
    if form.error:
        st.error(form.error)
        if form.text:
            st.caption(f"Not sent: {form.text}")
    message = st.chat_input("Describe what happened...", disabled=form.busy)
    if message:
        with st.spinner("Thinking..."):
            ws.send_chat(message)
        st.rerun()


VIEWS = {
    View.dashboard: show_dashboard,
    View.website_scan: show_website_scan,
    View.audio_scan: show_audio_scan,
    View.intelligence: show_intelligence,
    View.recovery: show_recovery,
    View.chat: show_chat,
}

with st.sidebar:
    st.markdown("## 🛡️ CyberGuard")
    choice = st.radio(
        "Navigate",
        list(NAV_LABELS),
        index=list(NAV_LABELS).index(ws.active_view),
        format_func=NAV_LABELS.get,
    )
    if choice != ws.active_view:
        ws.select(choice)

VIEWS[ws.active_view]()
