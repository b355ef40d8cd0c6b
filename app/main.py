"""
Streamlit Frontend for Mind the Gap

This is the dashboard people use to see how much of their income they
give to charity, and what that rate would mean for a billionaire.

DESIGN PRINCIPLES:
1. Every figure on screen is derived from confirmed state
2. One transient message at a time (saved / failed / copied)
3. Nothing is sent anywhere until the form input is valid

The dashboard flow lives in session state, one per browser session. The
persistence strategy (backend API or local storage) comes from settings.
"""

import asyncio

import plotly.graph_objects as go
import streamlit as st

from mindthegap.calculations.annualization import Frequency
from mindthegap.config import get_settings
from mindthegap.log import configure_logging
from mindthegap.models.dashboard import Aggregation, DashboardView, MessageType
from mindthegap.orchestrator import DashboardFlow, create_app_components
from mindthegap.presentation import donation_card_html
from mindthegap.services.persistence.streamlit_env import StreamlitClientEnvironment


# Page configuration
st.set_page_config(
    page_title="Mind the Gap",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .donation-card {
        padding: 12px 16px;
        border-radius: 10px;
        border-left: 5px solid #0039a6;
        background-color: #f4f6fb;
        margin: 6px 0;
    }
</style>
""", unsafe_allow_html=True)


FREQUENCY_OPTIONS = [Frequency.MONTHLY, Frequency.QUARTERLY, Frequency.YEARLY]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_flow() -> DashboardFlow:
    """Get or create this session's dashboard flow."""
    if "flow" not in st.session_state:
        settings = get_settings()
        configure_logging(debug=settings.app.debug_mode)
        environment = StreamlitClientEnvironment(settings.app)
        flow = create_app_components(environment, settings=settings)
        run_async(flow.initialise())
        st.session_state.flow = flow
    return st.session_state.flow


# =============================================================================
# CHARTS
# =============================================================================

def create_income_pie(aggregation: Aggregation) -> go.Figure:
    slices = aggregation.income_pie
    fig = go.Figure(go.Pie(
        labels=[s.name for s in slices],
        values=[s.value for s in slices],
        marker=dict(colors=[s.color for s in slices]),
        hole=0.45,
        sort=False,
    ))
    fig.update_layout(title="Income vs. giving", showlegend=True, height=360)
    return fig


def create_donation_pie(aggregation: Aggregation) -> go.Figure:
    slices = aggregation.donation_pie
    fig = go.Figure(go.Pie(
        labels=[s.name for s in slices],
        values=[s.value for s in slices],
        marker=dict(colors=[s.color for s in slices]),
        hole=0.45,
    ))
    fig.update_layout(title="Where your giving goes", showlegend=True, height=360)
    return fig


def create_comparison_bar(aggregation: Aggregation) -> go.Figure:
    bars = aggregation.billionaire_comparison
    fig = go.Figure(go.Bar(
        x=[bar.name for bar in bars],
        y=[bar.contribution for bar in bars],
        marker_color=[bar.color for bar in bars],
        text=[f"{bar.contribution:,.0f}" for bar in bars],
        textposition="outside",
    ))
    fig.update_layout(
        title="If they gave what you give",
        yaxis_title="Yearly donation",
        yaxis_type="log",
        height=420,
    )
    return fig


# =============================================================================
# SECTIONS
# =============================================================================

def render_message(view: DashboardView):
    message = view.message
    if message is None:
        return
    if message.type == MessageType.SUCCESS:
        st.success(message.text)
    elif message.type == MessageType.ERROR:
        st.error(message.text)
    else:
        st.info(message.text)


def render_income(flow: DashboardFlow, view: DashboardView):
    st.subheader("Your annual income")
    with st.form("income_form"):
        text = st.text_input(
            "Annual income (€)",
            value=view.income_input,
            placeholder="e.g. 50.000",
        )
        if st.form_submit_button("Save income", type="primary"):
            run_async(flow.submit_income(text))
            st.rerun()


def render_donation_form(flow: DashboardFlow, view: DashboardView):
    prefill = flow.edit_form() or {}
    editing = view.editing_id is not None
    st.subheader("Edit donation" if editing else "Add a donation")

    with st.form("donation_form", clear_on_submit=not editing):
        charity = st.text_input("Charity name", value=prefill.get("charity_name", ""))
        amount = st.text_input("Amount (€)", value=prefill.get("amount", ""))
        frequency = st.selectbox(
            "Frequency",
            FREQUENCY_OPTIONS,
            index=FREQUENCY_OPTIONS.index(prefill.get("frequency", Frequency.MONTHLY)),
            format_func=lambda f: f.label,
        )
        submitted = st.form_submit_button(
            "Update donation" if editing else "Add donation",
            type="primary",
        )

    if submitted:
        run_async(flow.submit_donation(charity, amount, frequency))
        st.rerun()

    if editing and st.button("Cancel editing"):
        flow.cancel_editing()
        st.rerun()


def render_donations(flow: DashboardFlow, view: DashboardView):
    st.subheader("Your donations")
    if not view.donations:
        st.info("No donations yet. Add the charities you support to see your impact.")
        return

    formatter = flow.formatter
    for item in view.aggregation.shares:
        donation = item.donation
        col1, col2, col3 = st.columns([6, 1, 1])
        with col1:
            st.markdown(donation_card_html(item, formatter), unsafe_allow_html=True)
        with col2:
            if st.button("Edit", key=f"edit_{donation.id}"):
                flow.start_editing(donation.id)
                st.rerun()
        with col3:
            if st.button("Remove", key=f"remove_{donation.id}"):
                run_async(flow.remove_donation(donation.id))
                st.rerun()


def render_share(flow: DashboardFlow, view: DashboardView):
    st.subheader("Share")
    if st.button("Copy shareable link"):
        # No rerun: the clipboard script has to reach the page
        run_async(flow.share())
        view = flow.view()
    if view.share_link:
        st.code(view.share_link, language=None)
    if view.social_share_url:
        st.link_button("Post it", view.social_share_url)


def main():
    """Main application entry point."""
    flow = get_flow()
    view = flow.view()

    with st.sidebar:
        st.title("💸 Mind the Gap")
        st.markdown("---")
        render_income(flow, view)
        st.markdown("---")
        render_donation_form(flow, view)
        st.markdown("---")
        render_share(flow, view)

    # Sharing does not rerun the script, so pick up its message here
    view = flow.view()

    st.title("How much of your income do you give?")
    render_message(view)

    cols = st.columns(len(view.metrics))
    for col, metric in zip(cols, view.metrics):
        col.metric(metric.label, metric.value)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(create_income_pie(view.aggregation), use_container_width=True)
    with col2:
        if view.donations:
            st.plotly_chart(create_donation_pie(view.aggregation), use_container_width=True)

    if view.aggregation.billionaire_comparison:
        st.plotly_chart(create_comparison_bar(view.aggregation), use_container_width=True)
    else:
        st.info("Add your income and a donation to compare yourself with the richest people on earth.")

    render_donations(flow, view)


if __name__ == "__main__":
    main()
