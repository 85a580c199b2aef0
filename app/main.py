"""
Streamlit Frontend for Marathi Invoice

Pages:
1. Direct entry - type a ledger invoice, see the Marathi preview, save
2. Excel import - distribution workbook -> one invoice per cinema
3. Reports - dashboard figures and the filtered Excel report
4. Settings - connection status

The UI keeps the save explicit:
- The preview updates from whatever is typed
- Nothing is saved without the "Save" button
- An existing invoice number is only overwritten after a second confirmation
"""

import asyncio
from datetime import date
from decimal import Decimal

import streamlit as st
from pydantic import ValidationError

from marathi_invoice.audit import create_correlation_id
from marathi_invoice.calculations import TaxType
from marathi_invoice.config import get_settings, validate_all_settings
from marathi_invoice.models import DirectInvoice
from marathi_invoice.orchestrator import (
    ExcelImportFlow,
    InvoiceFlow,
    ReportFlow,
    SaveOutcome,
    create_app_components,
)
from marathi_invoice.reports import ReportError
from marathi_invoice.services.excel import ExcelImportError
from marathi_invoice.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Marathi Invoice",
    page_icon="🧾",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .preview-box {
        padding: 20px;
        border: 1px solid #999;
        border-radius: 6px;
        font-size: 1.1em;
    }
    .big-number {
        font-size: 2.0em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components(use_storage=True)


def _records(edited) -> list[dict]:
    if hasattr(edited, "to_dict"):
        return edited.to_dict("records")
    return list(edited)


def main():
    """Main application entry point."""
    invoice_flow, excel_flow, report_flow, _ = get_components()

    st.sidebar.title("🧾 Marathi Invoice")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["✍️ Direct Entry", "📥 Excel Import", "📊 Reports", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Fill in the invoice or upload a workbook
        2. Check the preview
        3. Save to keep it for reports
        """
    )

    if page == "✍️ Direct Entry":
        render_direct_entry_page(invoice_flow)
    elif page == "📥 Excel Import":
        render_excel_page(excel_flow)
    elif page == "📊 Reports":
        render_reports_page(report_flow)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_direct_entry_page(invoice_flow: InvoiceFlow):
    st.title("✍️ Direct Entry")

    if "draft_template" not in st.session_state:
        st.session_state.draft_template = invoice_flow.new_draft()
    if "pending_overwrite" not in st.session_state:
        st.session_state.pending_overwrite = None
    template: DirectInvoice = st.session_state.draft_template

    col1, col2, col3 = st.columns(3)
    with col1:
        invoice_no = st.text_input("Invoice No.", value=template.invoice_no)
        invoice_date = st.text_input("Date (DD-MM-YYYY)", value=template.invoice_date)
        mr_ra_ra = st.text_input("Mr. Ra. Ra.", value=template.mr_ra_ra)
    with col2:
        place = st.text_input("Place", value=template.place)
        to = st.text_input("To", value=template.to)
        ra_ra_no = st.text_input("Ra. Ra. No.", value=template.ra_ra_no)
    with col3:
        cheque_draft_no = st.text_input("Cheque / Draft No.", value=template.cheque_draft_no)
        received = st.text_input("Received", value=template.received)
        deposit = st.text_input("Deposit", value=template.deposit)

    st.markdown("### Sales")
    sales = st.data_editor(
        [item.model_dump() for item in template.line_items],
        num_rows="dynamic",
        use_container_width=True,
        key="sales_editor",
    )

    st.markdown("### Expenses")
    expenses = st.data_editor(
        [entry.model_dump() for entry in template.expenses],
        num_rows="dynamic",
        use_container_width=True,
        key="expenses_editor",
    )

    try:
        draft = DirectInvoice(
            invoice_no=invoice_no,
            invoice_date=invoice_date,
            mr_ra_ra=mr_ra_ra,
            place=place,
            to=to,
            cheque_draft_no=cheque_draft_no,
            received=received,
            deposit=deposit,
            ra_ra_no=ra_ra_no,
            line_items=_records(sales),
            expenses=_records(expenses),
        )
    except ValidationError as e:
        st.warning(f"Some fields could not be read: {e.error_count()} problem(s). Check the sheet.")
        return

    correlation_id = create_correlation_id()
    preview = run_async(invoice_flow.build_preview(draft, correlation_id))
    validation, message = run_async(invoice_flow.validate(draft))

    st.markdown("---")
    st.subheader("🧾 Preview")
    header = preview.header
    st.markdown(f"""
    <div class="preview-box">
        <p><strong>पावती क्र.</strong> {header['invoice_no']} &nbsp; <strong>दिनांक</strong> {header['invoice_date']}</p>
        <p><strong>मे. रा. रा.</strong> {header['mr_ra_ra']} &nbsp; <strong>मु.</strong> {header['place']}</p>
        <p><strong>एकूण विक्री</strong> {preview.total_sales}</p>
        <p><strong>एकूण खर्च</strong> {preview.total_expenses}</p>
        <p><strong>निव्वळ रक्कम</strong> <span class="big-number">{preview.net_balance}</span></p>
        <p><em>{preview.amount_in_words}</em></p>
    </div>
    """, unsafe_allow_html=True)

    with st.expander("Rows"):
        st.table([row for row in preview.rows if row["rs"]])

    if validation.is_valid and not validation.warnings:
        st.markdown(f'<div class="success-box">{message}</div>', unsafe_allow_html=True)
    else:
        st.markdown(f'<div class="warning-box">{message.replace(chr(10), "<br>")}</div>', unsafe_allow_html=True)

    if st.button("💾 Save Invoice", type="primary"):
        _save_draft(invoice_flow, draft, overwrite=False)

    if st.session_state.pending_overwrite == draft.invoice_no:
        st.warning(f"Invoice number {draft.invoice_no} already exists.")
        if st.button("✅ Yes, update it"):
            _save_draft(invoice_flow, draft, overwrite=True)


def _save_draft(invoice_flow: InvoiceFlow, draft: DirectInvoice, overwrite: bool):
    try:
        result = run_async(invoice_flow.save(draft, overwrite=overwrite))
    except StorageError as e:
        st.error(f"Failed to save: {e}")
        return

    if result.outcome == SaveOutcome.NEEDS_CONFIRMATION:
        st.session_state.pending_overwrite = result.invoice_no
        st.rerun()
    st.session_state.pending_overwrite = None
    if result.saved:
        st.success(result.message)
    else:
        st.info(result.message)


def render_excel_page(excel_flow: ExcelImportFlow):
    st.title("📥 Excel Import")
    st.markdown("Upload the distribution workbook. Each cinema row becomes one invoice.")

    settings = get_settings().app

    col1, col2, col3 = st.columns(3)
    with col1:
        percent = st.number_input(
            "Distribution share (%)",
            min_value=0.0,
            max_value=100.0,
            value=float(settings.default_distribution_percent),
        )
    with col2:
        gst_rate = st.number_input(
            "GST rate (%)",
            min_value=0.0,
            max_value=100.0,
            value=float(settings.default_gst_rate),
        )
    with col3:
        tax_type = st.selectbox(
            "Tax type",
            options=list(TaxType),
            index=list(TaxType).index(TaxType(settings.default_tax_type)),
            format_func=lambda t: t.value,
        )

    col1, col2 = st.columns(2)
    with col1:
        screening_from = st.text_input("Screening from (DD-MM-YYYY)", value="")
    with col2:
        screening_to = st.text_input("Screening to (DD-MM-YYYY)", value="")

    uploaded = st.file_uploader("Choose a workbook", type=["xlsx"])
    if not uploaded:
        return

    try:
        imported = run_async(excel_flow.import_workbook(
            uploaded.getvalue(),
            uploaded.name,
            distribution_percent=Decimal(str(percent)),
            gst_rate=Decimal(str(gst_rate)),
            tax_type=tax_type,
            screening_from=screening_from or None,
            screening_to=screening_to or None,
        ))
    except ExcelImportError as e:
        st.error(f"Could not import workbook: {e}")
        return

    st.success(f"{len(imported)} invoice(s) found")
    for index, item in enumerate(imported):
        invoice, summary = item.invoice, item.summary
        with st.expander(f"{invoice.invoice_no or 'no In_no'} · {invoice.client_name} · {invoice.cinema_name}"):
            st.table([row.model_dump() for row in summary.rows])
            st.markdown(f"""
            - **Total collection:** {summary.total_collection:.2f}
            - **Deductions:** {summary.total_deduction:.2f}
            - **Net collection:** {summary.net_collection:.2f}
            - **Taxable ({summary.distribution_percent}%):** {summary.taxable_amount:.2f}
            - **Tax:** {summary.tax.total_tax:.2f} ({summary.tax.tax_type.value})
            - **Net payable:** {summary.net_payable:.2f}
            - *{summary.amount_in_words}*
            """)

            overwrite = st.checkbox("Update if this invoice number exists", key=f"overwrite_{index}")
            if st.button("💾 Save", key=f"save_{index}"):
                try:
                    result = run_async(excel_flow.save(item, overwrite=overwrite))
                except StorageError as e:
                    st.error(f"Failed to save: {e}")
                    continue
                if result.saved:
                    st.success(result.message)
                else:
                    st.warning(result.message)


def render_reports_page(report_flow: ReportFlow):
    st.title("📊 Reports")

    try:
        records = run_async(report_flow.load())
    except (ReportError, StorageError) as e:
        st.error(f"Could not load invoices: {e}")
        return

    summary = run_async(report_flow.summary(records))
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Total invoices", summary.total_invoices, f"₹{summary.total_revenue:,.2f}")
    with col2:
        st.metric("This month", summary.this_month_invoices, f"₹{summary.this_month_revenue:,.2f}")
    with col3:
        st.metric("Last month", summary.last_month_invoices, f"₹{summary.last_month_revenue:,.2f}")

    st.markdown("---")
    st.markdown("### Generate report")

    col1, col2, col3 = st.columns(3)
    with col1:
        start_date = st.date_input("From", value=None)
    with col2:
        end_date = st.date_input("To", value=None)
    with col3:
        clients = run_async(report_flow.clients(records))
        client = st.selectbox(
            "Client",
            options=[None] + clients,
            format_func=lambda c: "All clients" if c is None else c,
        )

    if st.button("📄 Generate Excel Report", type="primary"):
        try:
            report = run_async(report_flow.generate(
                start_date=start_date,
                end_date=end_date,
                client=client,
                records=records,
            ))
        except ReportError as e:
            st.warning(str(e))
            return

        st.success(f"{report.row_count} invoice(s) in report")
        st.download_button(
            "⬇️ Download",
            data=report.content,
            file_name=report.filename,
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Transliteration", "transliteration"),
        ("Invoice service", "invoice_backend"),
        ("Google Sheets (Audit log)", "google_sheets"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Settings are read from environment variables or a `.env` file "
        "(`TRANSLITERATION_*`, `INVOICE_BACKEND_*`, `GOOGLE_SHEETS_*`)."
    )
    st.caption(f"Today: {date.today().strftime('%d-%m-%Y')}")


if __name__ == "__main__":
    main()
