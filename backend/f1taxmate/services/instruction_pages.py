"""
Instruction Pages Generator

Draws the cover, letter, filing, checklist and FAQ pages that precede the
filled forms in every package. These pages are never mailed, so each page
carries a "do not mail" header.
"""

import io
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas
import structlog

from f1taxmate.models.filing import AccountType
from f1taxmate.models.forms import ProductId
from f1taxmate.services import income_totals
from f1taxmate.services.forms.base import FilingContext

logger = structlog.get_logger()

COLOR_PRIMARY = colors.HexColor("#0ea5e9")
COLOR_PRIMARY_DARK = colors.HexColor("#0284c7")
COLOR_DARK = colors.HexColor("#0f172a")
COLOR_TEXT = colors.Color(0.22, 0.22, 0.22)
COLOR_MUTED = colors.Color(0.5, 0.5, 0.5)
COLOR_RED = colors.HexColor("#dc2626")
COLOR_LIGHT_BG = colors.Color(0.97, 0.97, 0.97)
COLOR_BORDER = colors.Color(0.84, 0.84, 0.84)

DO_NOT_MAIL = "Instruction page only. Do not mail with your tax return."
BRAND = "f1taxmate"

IRS_CERTIFIED_MAIL = ["Department of the Treasury", "Internal Revenue Service", "Austin, TX 73301-0215, USA"]
IRS_PRIVATE_DELIVERY = [
    "Austin - Internal Revenue",
    "Submission Processing Center",
    "3651 S IH35,",
    "Austin, TX 78741, USA",
]
ILLINOIS_MAIL = ["Illinois Department of Revenue", "PO BOX 19027", "Springfield, IL 62794-9027", "USA"]

PRIVATE_DELIVERY_NOTE = "If you want to use approved Private Delivery Service, please mail it to:"


def display_money(amount) -> str:
    """$1,234 (whole dollars, rounded down)"""
    return f"${int(Decimal(amount)):,}"


@dataclass
class MailingAddress:
    label: str
    lines: List[str]


@dataclass
class Table:
    columns: List[Tuple[str, float]]
    rows: List[List[str]]


@dataclass
class ChecklistStep:
    text: str
    table: Optional[Table] = None
    note: str = ""


@dataclass
class InstructionContent:
    """Everything drawn on the instruction pages of one product"""
    title: str
    cover_lines: List[str]
    letter_body: str
    summary_title: str
    summary_rows: List[Tuple[str, str]]
    result_question: str
    result_text: str
    filing_question: str
    filing_text: str
    addresses: List[MailingAddress]
    checklist_title: str
    checklist: List[ChecklistStep]
    faq_title: str
    faq: List[Tuple[str, str]]
    notice_title: str = ""
    notice_text: str = ""
    closing_question: str = ""
    closing_text: str = ""
    cover_footer: str = ""
    extra_paragraphs: List[str] = field(default_factory=list)


def irs_addresses() -> List[MailingAddress]:
    return [
        MailingAddress("Via USPS Certified Mail:", IRS_CERTIFIED_MAIL),
        MailingAddress("Via Private Delivery Service:", IRS_PRIVATE_DELIVERY),
    ]


def signature_table(rows: List[List[str]]) -> Table:
    return Table(columns=[("Form", 2.8 * inch), ("Action", 4.2 * inch)], rows=rows)


def deposit_sentence(ctx: FilingContext) -> str:
    bank = ctx.income.bank_details
    if bank is None:
        return "The refund will be mailed to you as a paper check."
    account = "checking" if bank.account_type == AccountType.CHECKING else "savings"
    return f"This will be deposited directly into your {account} account."


def federal_content(ctx: FilingContext) -> InstructionContent:
    federal = ctx.tax_result.federal_tax
    breakdown = federal.breakdown
    year = ctx.tax_year

    if federal.refund > 0:
        result = f"Your federal tax refund is {display_money(federal.refund)}. {deposit_sentence(ctx)}"
        refund_cell = display_money(federal.refund)
    elif federal.amount_owed > 0:
        result = f"You owe {display_money(federal.amount_owed)} to the IRS. Please include payment with your return."
        refund_cell = f"({display_money(federal.amount_owed)})"
    else:
        result = "You have no refund or amount owed."
        refund_cell = display_money(0)

    return InstructionContent(
        title="Federal Tax Return",
        cover_lines=["FEDERAL FILING COPY", "SIGN AND MAIL TO THE INTERNAL REVENUE SERVICE"],
        letter_body=(
            f"Enclosed please find two copies of your {year} federal income tax return, which you prepared "
            "through F1TaxMate tax software. File one copy with the Internal Revenue Service and retain "
            "the second copy for your records."
        ),
        summary_title="Tax Summary",
        summary_rows=[
            ("Filing Status", "Other single nonresident alien"),
            ("Gross Income", display_money(breakdown.gross_income)),
            ("Federal Adjusted Gross Income", display_money(breakdown.gross_income)),
            ("Federal Taxable Income", display_money(breakdown.taxable_income)),
            ("Refund Amount", refund_cell),
        ],
        result_question="How much is my refund?",
        result_text=result,
        filing_question="How do I file my tax return?",
        filing_text=(
            "Your tax return must be received by April 15th. However, we recommend you mail your federal "
            "return as soon as possible using the United States Post Office certified mail service to:"
        ),
        addresses=irs_addresses(),
        closing_question="When will I receive my refund?",
        closing_text=(
            "The IRS typically takes 4-6 weeks to process your return. You can check the status at any time "
            "using \"Where's My Refund?\" at www.IRS.gov, or call the IRS TeleTax System at 800-829-4477 or "
            "the Refund Hotline at 800-829-1954. When you call or go online, have ready: the SSN/ITIN on "
            "your return, your filing status, and the exact refund amount."
        ),
        checklist_title="Federal Tax Return checklist",
        checklist=[
            ChecklistStep(
                "Review and sign the following form(s) where indicated with a pen mark.",
                table=signature_table([
                    ["1040-NR", "Sign on page 2"],
                    ["8843", "No need to sign when attached to 1040-NR"],
                ]),
            ),
            ChecklistStep(
                "Attach copies of all your income and tax withholding statements showing the US income "
                "sources you used to prepare your tax return:",
                table=Table(
                    columns=[("Income Document", 4.2 * inch), ("Quantity", 2.8 * inch)],
                    rows=[["W-2 form(s), Copy B *", str(len(ctx.income.w2_forms))]],
                ),
                note="* If there is a difference between copies B and C, please attach Copy C to your "
                     "Federal tax return.",
            ),
            ChecklistStep(
                "Confirm that the SSN on all your W2(s) is correct.",
                note="If you don't have your W2(s) or your SSN on your payment document(s) is incorrect, "
                     "then you'll need to obtain an updated W2 from your employer(s).",
            ),
            ChecklistStep(
                "We recommend you mail your federal return with all necessary supporting documents and "
                "attachments as soon as possible using the United States Post Office certified mail "
                "service to the address on page 3."
            ),
        ],
        faq_title="Federal Tax Return - Frequently Asked Questions",
        faq=[
            ("How long will it take to process my return?",
             "The IRS typically takes 4-6 weeks. Exact timelines are set by the IRS."),
            ("What is the April 15th deadline?",
             "All tax returns for the prior year must be filed by April 15th. Late filing can result in "
             "penalties and interest."),
            ("What is a W-2 form?",
             "The W-2 shows wages and tax withheld. You receive it from your employer(s) by January. "
             "Attach Copy B to your return."),
            ("What if I don't have a Social Security Number?",
             "You may need an ITIN (Individual Taxpayer Identification Number). See IRS instructions for "
             "applying."),
        ],
    )


def illinois_content(ctx: FilingContext) -> InstructionContent:
    state = ctx.tax_result.state_tax
    breakdown = state.breakdown
    year = ctx.tax_year

    if state.refund > 0:
        result = (f"Your Illinois state tax refund is {display_money(state.refund)}. This will be deposited "
                  "directly into your bank account if you provided direct deposit details.")
        refund_cell = display_money(state.refund)
    elif state.amount_owed > 0:
        result = (f"You owe {display_money(state.amount_owed)} to the Illinois Department of Revenue. "
                  "Please include payment with your return.")
        refund_cell = f"({display_money(state.amount_owed)})"
    else:
        result = "You have no refund or amount owed for Illinois."
        refund_cell = display_money(0)

    return InstructionContent(
        title="Illinois State Tax Return",
        cover_lines=["STATE FILING COPY", "SIGN AND MAIL TO THE ILLINOIS DEPARTMENT OF REVENUE"],
        letter_body=(
            f"Enclosed please find two copies of your {year} Illinois state income tax return, which you "
            "prepared through F1TaxMate tax software. File one copy with the Illinois Department of "
            "Revenue and retain the second copy for your records."
        ),
        summary_title="Illinois Tax Summary",
        summary_rows=[
            ("Base Income", display_money(breakdown.gross_income)),
            ("Net Income", display_money(breakdown.taxable_income)),
            ("Tax (4.95%)", display_money(state.tax_owed)),
            ("Total Payments", display_money(breakdown.withheld)),
            ("Refund Amount", refund_cell),
        ],
        result_question="How much is my Illinois refund?",
        result_text=result,
        filing_question="How do I file my Illinois tax return?",
        filing_text=(
            "Your Illinois state tax return must be received by April 18th. We recommend you mail your "
            "state return as soon as possible using the United States Post Office certified mail service to:"
        ),
        addresses=[MailingAddress("Via USPS Mail:", ILLINOIS_MAIL)],
        checklist_title="Illinois State Tax Return checklist",
        checklist=[
            ChecklistStep(
                "Review and sign the following form(s) where indicated with a pen mark.",
                table=signature_table([
                    ["IL-1040", "Sign on page 2"],
                    ["Schedule NR", "No signature required"],
                    ["Schedule IL-WIT", "No signature required"],
                ]),
            ),
            ChecklistStep(
                "Attach copies of all your income and tax withholding statements showing Illinois income "
                "sources you used to prepare your state return:",
                table=Table(
                    columns=[("Income Document", 4.2 * inch), ("Quantity", 2.8 * inch)],
                    rows=[["W-2 form(s), Copy 2 *", str(len(ctx.income.w2_forms))]],
                ),
                note="* Attach Copy 2 of your W-2 forms (the state copy). This is different from the "
                     "federal return which uses Copy B.",
            ),
            ChecklistStep(
                "Confirm that the SSN on all your W-2(s) is correct.",
                note="If you don't have your W-2(s) or your SSN on your payment document(s) is incorrect, "
                     "then you'll need to obtain an updated W-2 from your employer(s).",
            ),
            ChecklistStep(
                "Mail your Illinois state return with all necessary supporting documents and attachments "
                "as soon as possible using the United States Post Office certified mail service to the "
                "Illinois Department of Revenue address on page 3."
            ),
        ],
        faq_title="Illinois State Tax Return - Frequently Asked Questions",
        faq=[
            ("How long will it take to process my Illinois return?",
             "The Illinois Department of Revenue typically processes returns within 8-12 weeks. You can "
             "check the status at mytax.illinois.gov."),
            ("What is the filing deadline for Illinois?",
             "Illinois state tax returns must be filed by April 18th. Late filing can result in penalties "
             "and interest."),
            ("What is Schedule NR?",
             "Schedule NR (Nonresident and Part-Year Resident Computation of Illinois Tax) is used to "
             "calculate the portion of income taxable by Illinois if you were a nonresident or part-year "
             "resident."),
            ("What is Schedule IL-WIT?",
             "Schedule IL-WIT (Illinois Income Tax Withholding) reports the amount of Illinois income tax "
             "withheld from your wages or other payments during the year."),
            ("Which W-2 copy do I attach to my Illinois return?",
             "Attach Copy 2 (the state copy) of your W-2 forms to your Illinois return. This is different "
             "from the federal return, which uses Copy B."),
        ],
    )


def fica_content(ctx: FilingContext) -> InstructionContent:
    totals = income_totals.fica_totals(ctx.income)
    w2_count = len(income_totals.fica_w2_forms(ctx.income))

    return InstructionContent(
        title="FICA Tax Refund Claim",
        cover_lines=[
            "Form 843 + Form 8316",
            "SIGN AND MAIL SEPARATELY TO THE IRS",
            "DO NOT INCLUDE WITH YOUR 1040-NR OR STATE RETURN",
        ],
        cover_footer=f"Refund Amount: {display_money(totals.total)}",
        letter_body=(
            "This package contains your FICA (Social Security and Medicare) tax refund claim, prepared "
            "through F1TaxMate tax software. As an F-1 student, you are generally exempt from FICA taxes "
            "under IRC Section 3121(b)(19) for as long as you remain a nonresident alien. If your employer "
            "withheld FICA from your wages in error, you can request a refund from the IRS."
        ),
        summary_title="What is included in this package?",
        summary_rows=[
            ("Form 843", "Claim for Refund - requests the FICA refund amount"),
            ("Form 8316", "Statement confirming employer did not refund FICA"),
        ],
        result_question="Your FICA refund claim:",
        result_text=(
            f"{display_money(totals.total)} (Social Security: {display_money(totals.social_security)} + "
            f"Medicare: {display_money(totals.medicare)})"
        ),
        notice_title="Important - Mail Separately from Your Tax Return",
        notice_text=(
            "Form 843 and Form 8316 must be mailed separately to the IRS. Do NOT include them in the same "
            "envelope as your Form 1040-NR federal tax return or your state tax return. The FICA refund "
            "claim is a separate process handled by a different IRS department."
        ),
        filing_question="How do I file my FICA refund claim?",
        filing_text=(
            "Mail your signed forms with all attachments using the United States Post Office certified "
            "mail service to:"
        ),
        addresses=irs_addresses(),
        checklist_title="FICA Refund checklist",
        checklist=[
            ChecklistStep(
                "Review and sign the following forms where indicated with a pen mark.",
                table=signature_table([
                    ["Form 843", "Sign and date on page 2"],
                    ["Form 8316", "Sign and date at the bottom of page 1"],
                ]),
            ),
            ChecklistStep(
                "Gather and attach the following documents to your signed forms. All items must be "
                "included for the IRS to process your FICA refund:",
                table=Table(
                    columns=[("Document", 5.0 * inch), ("Quantity", 2.0 * inch)],
                    rows=[
                        ["W-2 form(s) showing FICA withheld (Copy B or C)", str(w2_count)],
                        ["Form 843 (signed)", "1"],
                        ["Form 8316 (signed)", "1"],
                        ["Copy of passport (photo page)", "1"],
                        ["Copy of most recent I-20 or DS-2019", "1"],
                        ["Copy of most recent I-94 record (from i94.cbp.dhs.gov)", "1"],
                        ["Pay Dates List (see note below)", "1"],
                    ],
                ),
                note="Pay Dates List: On a blank sheet of paper, write \"Pay Dates List\" at the top and "
                     "list all pay dates when FICA was withheld; attach it.",
            ),
            ChecklistStep(
                "Verify that Box 4 (Social Security) and Box 6 (Medicare) on your W-2 show the amounts "
                "you are claiming as a refund.",
                note="If your employer provided a written statement confirming they cannot refund the "
                     "FICA, attach it. If not, the pre-filled explanation on Form 8316 is sufficient.",
            ),
            ChecklistStep(
                "Mail this FICA refund package in a SEPARATE envelope. Do NOT include it with your "
                "Form 1040-NR federal return or your state return."
            ),
        ],
        faq_title="FICA Refund - Frequently Asked Questions",
        faq=[
            ("Why am I exempt from FICA taxes?",
             "Under IRC Section 3121(b)(19), nonresident aliens on F-1 (or J-1) visas are exempt from "
             "Social Security and Medicare taxes for services performed as a student. This applies as long "
             "as you remain a nonresident alien (generally, fewer than 5 calendar years in the U.S. in F/J "
             "status)."),
            ("What if my employer already refunded me?",
             "If your employer reimbursed you for the erroneously withheld FICA, you should not file Form "
             "843 for that amount. Only request a refund from the IRS for amounts your employer has not "
             "already returned to you."),
            ("How long until I get my FICA refund?",
             "The IRS typically processes Form 843 refund claims within 6 to 12 weeks. Use certified mail "
             "so you have proof of filing date."),
            ("Do I file this with my 1040-NR?",
             "No. Form 843 and Form 8316 are filed separately from your income tax return. Mail them in a "
             "separate envelope to the IRS address shown above."),
            ("What documents should I include in the envelope?",
             "Include: signed Form 843, signed Form 8316, copy of your W-2(s) showing FICA withheld, copy "
             "of your passport photo page, copy of your I-20 (or DS-2019), and a printout of your I-94 "
             "record. Keep originals for your records."),
            ("Can I claim a FICA refund for prior years?",
             "Yes. You can file Form 843 for FICA refunds for up to 3 years from the date the tax was paid. "
             "Each tax year requires a separate Form 843."),
        ],
    )


def form_8843_content(ctx: FilingContext) -> InstructionContent:
    year = ctx.tax_year
    return InstructionContent(
        title="Statement for Exempt Individuals",
        cover_lines=["FORM 8843", "SIGN AND MAIL TO THE INTERNAL REVENUE SERVICE"],
        letter_body=(
            f"Enclosed please find two copies of your Form 8843 (Statement for Exempt Individuals) for "
            f"{year}, which you prepared through F1TaxMate tax software. File one copy with the Internal "
            "Revenue Service and retain the second copy for your records."
        ),
        extra_paragraphs=[
            "Form 8843 is required for all nonresident aliens present in the U.S. under F, J, M, or Q visa "
            "status, even if you had no U.S. income. It must be filed by June 15th (or April 15th if you "
            "had income). Since you had no U.S. income, you only need to file Form 8843.",
        ],
        summary_title="Summary",
        summary_rows=[
            ("Visa Type", ctx.personal.visa_type or "-"),
            (f"Days present in {year}", str(ctx.days_in(year))),
            (f"Days present in {year - 1}", str(ctx.days_in(year - 1))),
            (f"Days present in {year - 2}", str(ctx.days_in(year - 2))),
        ],
        result_question="",
        result_text="",
        filing_question="How do I file my Form 8843?",
        filing_text=(
            "Mail your signed Form 8843 as soon as possible using the United States Post Office certified "
            "mail service to:"
        ),
        addresses=irs_addresses(),
        checklist_title="Form 8843 checklist",
        checklist=[
            ChecklistStep(
                "Review and sign the following form where indicated with a pen mark.",
                table=signature_table([["8843", "Sign on page 2"]]),
            ),
            ChecklistStep(
                "Since you had no U.S. income, you do not need to attach any W-2 or income documents. "
                "Only Form 8843 is required."
            ),
            ChecklistStep(
                "Verify that all personal information on Form 8843 is correct, including your visa type, "
                "days of presence, and academic institution details."
            ),
            ChecklistStep(
                "Mail your signed Form 8843 as soon as possible using the United States Post Office "
                "certified mail service to the address on page 3."
            ),
        ],
        faq_title="Form 8843 - Frequently Asked Questions",
        faq=[
            ("What is Form 8843?",
             "Form 8843 is a statement required by the IRS for all nonresident aliens present in the U.S. "
             "under an exempt visa status (F, J, M, or Q). It declares your exempt status and the number "
             "of days you were present in the U.S."),
            ("Do I need to file Form 8843 if I had no income?",
             "Yes. Form 8843 must be filed regardless of whether you had any U.S. income. It is used to "
             "exclude days of presence for the substantial presence test."),
            ("When is Form 8843 due?",
             "If you had no U.S. income, Form 8843 is due by June 15th. If you had U.S. income, it is due "
             "by April 15th (attached to your 1040-NR)."),
            ("Do I need to sign Form 8843?",
             "Yes. When Form 8843 is filed by itself (not attached to a 1040-NR), you must sign and date "
             "it on page 2."),
            ("Where do I mail Form 8843?",
             "Mail it to the IRS at: Department of the Treasury, Internal Revenue Service, Austin, TX "
             "73301-0215, USA."),
        ],
    )


CONTENT_BUILDERS = {
    ProductId.FEDERAL: federal_content,
    ProductId.ILLINOIS: illinois_content,
    ProductId.FICA: fica_content,
    ProductId.FORM_8843: form_8843_content,
}


class _Cursor:
    """Current canvas, vertical position and page number"""

    def __init__(self, pdf: canvas.Canvas, y: float):
        self.pdf = pdf
        self.y = y
        self.page = 1


class InstructionPageGenerator:
    """Draw instruction pages with reportlab"""

    def __init__(self):
        self.page_width, self.page_height = letter
        self.margin = 0.7 * inch
        self.content_width = self.page_width - 2 * self.margin
        self.line_height = 15

    def render(self, product_id: ProductId, context: FilingContext) -> bytes:
        """
        Instruction pages for one product

        Returns:
            PDF bytes: cover, letter and summary, filing instructions, checklist, FAQ
        """
        content = CONTENT_BUILDERS[product_id](context)

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=letter)
        pdf.setTitle(f"{content.title} {context.tax_year} - Instructions")
        cursor = _Cursor(pdf, self.page_height)

        self._draw_cover(cursor, content, context)
        self._new_page(cursor)
        self._draw_letter_page(cursor, content, context)
        self._new_page(cursor)
        self._draw_filing_page(cursor, content)
        self._new_page(cursor)
        self._draw_checklist_page(cursor, content)
        self._new_page(cursor)
        self._draw_faq_page(cursor, content)
        self._finish_page(cursor)

        pdf.save()
        logger.info("Instruction pages generated", product=product_id.value, pages=cursor.page)
        return buffer.getvalue()

    def placeholder_page(self, text: str) -> bytes:
        """Single page standing in for an optional sub-document that could not be produced"""
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=letter)
        pdf.setFont("Helvetica-Bold", 14)
        pdf.setFillColor(COLOR_DARK)
        pdf.drawCentredString(self.page_width / 2, self.page_height / 2, text)
        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    # Page plumbing

    def _draw_header(self, cursor: _Cursor):
        pdf = cursor.pdf
        y = self.page_height - 36
        pdf.setFont("Helvetica-Bold", 18)
        pdf.setFillColor(COLOR_PRIMARY)
        pdf.drawString(self.margin, y, BRAND)

        pdf.setFont("Helvetica-Bold", 8)
        pdf.setFillColor(COLOR_RED)
        pdf.drawRightString(self.page_width - self.margin, y + 3, DO_NOT_MAIL)

        pdf.setStrokeColor(COLOR_PRIMARY)
        pdf.setLineWidth(1.5)
        pdf.line(self.margin, y - 10, self.page_width - self.margin, y - 10)
        cursor.y = self.page_height - 80

    def _finish_page(self, cursor: _Cursor):
        pdf = cursor.pdf
        pdf.setFont("Helvetica", 9)
        pdf.setFillColor(COLOR_MUTED)
        pdf.drawRightString(self.page_width - self.margin, 28, str(cursor.page))
        pdf.showPage()

    def _new_page(self, cursor: _Cursor):
        self._finish_page(cursor)
        cursor.page += 1
        self._draw_header(cursor)

    def _ensure_space(self, cursor: _Cursor, needed: float):
        if cursor.y - needed < self.margin + 20:
            self._new_page(cursor)

    # Primitives

    def _heading(self, cursor: _Cursor, text: str, size: int = 14, color=COLOR_PRIMARY):
        self._ensure_space(cursor, self.line_height * 3)
        cursor.pdf.setFont("Helvetica-Bold", size)
        cursor.pdf.setFillColor(color)
        cursor.pdf.drawString(self.margin, cursor.y, text)
        cursor.y -= self.line_height * 1.3

    def _paragraph(self, cursor: _Cursor, text: str, font: str = "Helvetica", size: int = 10,
                   color=COLOR_TEXT, indent: float = 0):
        lines = simpleSplit(text, font, size, self.content_width - indent)
        for line in lines:
            self._ensure_space(cursor, self.line_height)
            cursor.pdf.setFont(font, size)
            cursor.pdf.setFillColor(color)
            cursor.pdf.drawString(self.margin + indent, cursor.y, line)
            cursor.y -= self.line_height

    def _summary_table(self, cursor: _Cursor, rows: List[Tuple[str, str]]):
        pdf = cursor.pdf
        row_height = 23
        label_width = 3.6 * inch
        self._ensure_space(cursor, row_height * (len(rows) + 1))

        pdf.setLineWidth(0.4)
        pdf.setStrokeColor(COLOR_BORDER)
        for index, (label, value) in enumerate(rows):
            row_y = cursor.y - row_height
            pdf.setFillColor(colors.white if index % 2 == 0 else COLOR_LIGHT_BG)
            pdf.rect(self.margin, row_y, self.content_width, row_height, stroke=1, fill=1)
            pdf.line(self.margin + label_width, cursor.y, self.margin + label_width, row_y)

            pdf.setFont("Helvetica-Oblique", 10)
            pdf.setFillColor(COLOR_TEXT)
            pdf.drawString(self.margin + 10, row_y + 8, label)
            pdf.setFont("Helvetica-Bold", 10)
            pdf.setFillColor(COLOR_DARK)
            pdf.drawString(self.margin + label_width + 10, row_y + 8, value)
            cursor.y = row_y
        cursor.y -= self.line_height

    def _table(self, cursor: _Cursor, table: Table, indent: float = 20):
        pdf = cursor.pdf
        row_height = 22
        x = self.margin + indent
        total_width = sum(width for _, width in table.columns)
        total_width = min(total_width, self.content_width - indent)
        self._ensure_space(cursor, row_height * (len(table.rows) + 1))

        pdf.setFillColor(COLOR_PRIMARY)
        pdf.rect(x, cursor.y - row_height, total_width, row_height, stroke=0, fill=1)
        column_x = x
        pdf.setFont("Helvetica-Bold", 10)
        pdf.setFillColor(colors.white)
        for label, width in table.columns:
            pdf.drawString(column_x + 10, cursor.y - row_height + 8, label)
            column_x += width
        cursor.y -= row_height

        pdf.setLineWidth(0.4)
        pdf.setStrokeColor(COLOR_BORDER)
        for index, row in enumerate(table.rows):
            row_y = cursor.y - row_height
            pdf.setFillColor(colors.white if index % 2 == 0 else COLOR_LIGHT_BG)
            pdf.rect(x, row_y, total_width, row_height, stroke=1, fill=1)
            column_x = x
            pdf.setFont("Helvetica", 9)
            pdf.setFillColor(COLOR_TEXT)
            for (_, width), cell in zip(table.columns, row):
                pdf.drawString(column_x + 10, row_y + 8, cell)
                column_x += width
            cursor.y = row_y
        cursor.y -= self.line_height * 0.8

    def _addresses(self, cursor: _Cursor, addresses: List[MailingAddress]):
        pdf = cursor.pdf
        block_height = self.line_height * (max(len(a.lines) for a in addresses) + 2)
        self._ensure_space(cursor, block_height)
        column_width = self.content_width / max(len(addresses), 1)
        top = cursor.y
        lowest = top
        for index, address in enumerate(addresses):
            x = self.margin + index * column_width
            y = top
            pdf.setFont("Helvetica-Bold", 10)
            pdf.setFillColor(COLOR_PRIMARY_DARK)
            pdf.drawString(x, y, address.label)
            y -= self.line_height
            pdf.setFont("Helvetica", 10)
            pdf.setFillColor(COLOR_TEXT)
            for line in address.lines:
                pdf.drawString(x, y, line)
                y -= self.line_height
            lowest = min(lowest, y)
        cursor.y = lowest - self.line_height

    # Pages

    def _draw_cover(self, cursor: _Cursor, content: InstructionContent, context: FilingContext):
        pdf = cursor.pdf
        pdf.setFont("Helvetica-Bold", 8)
        pdf.setFillColor(COLOR_RED)
        pdf.drawRightString(self.page_width - self.margin, self.page_height - 36, DO_NOT_MAIL)

        pdf.setFont("Helvetica-Bold", 22)
        pdf.setFillColor(COLOR_PRIMARY)
        pdf.drawString(self.margin, self.page_height - 2 * inch, BRAND)

        pdf.setFont("Helvetica-Bold", 26)
        pdf.setFillColor(COLOR_DARK)
        pdf.drawString(self.margin, self.page_height - 3.2 * inch, content.title)
        pdf.setFont("Helvetica", 14)
        pdf.drawString(self.margin, self.page_height - 3.6 * inch, "for")
        pdf.setFont("Helvetica-Bold", 26)
        pdf.setFillColor(COLOR_PRIMARY_DARK)
        pdf.drawString(self.margin, self.page_height - 4.1 * inch, str(context.tax_year))

        pdf.setFont("Helvetica-Bold", 12)
        pdf.setFillColor(COLOR_DARK)
        y = self.page_height - 5.2 * inch
        for line in content.cover_lines:
            pdf.drawString(self.margin, y, line)
            y -= 20

        if content.cover_footer:
            pdf.setFont("Helvetica-Bold", 14)
            pdf.setFillColor(COLOR_PRIMARY_DARK)
            pdf.drawString(self.margin, y - 10, content.cover_footer)

        pdf.setFillColor(COLOR_PRIMARY)
        pdf.rect(0, 0, self.page_width, 0.9 * inch, stroke=0, fill=1)
        pdf.setFillColor(colors.white)
        pdf.setFont("Helvetica-Bold", 9)
        pdf.drawString(self.margin, 0.45 * inch, "F1TaxMate")
        pdf.setFont("Helvetica", 9)
        pdf.drawString(self.margin, 0.3 * inch, "f1taxmate.com")

    def _draw_letter_page(self, cursor: _Cursor, content: InstructionContent, context: FilingContext):
        pdf = cursor.pdf
        personal = context.personal
        address = personal.us_address
        street = ", ".join(part for part in [address.address, address.address_line2] if part)
        city_line = ", ".join(part for part in [address.city, address.state, address.zip_code] if part)

        pdf.setFont("Helvetica-Bold", 10)
        pdf.setFillColor(COLOR_DARK)
        pdf.drawString(self.margin, cursor.y, personal.full_name.upper())
        cursor.y -= self.line_height
        pdf.setFont("Helvetica", 10)
        pdf.setFillColor(COLOR_TEXT)
        for line in (street, city_line.upper()):
            if line:
                pdf.drawString(self.margin, cursor.y, line)
                cursor.y -= self.line_height
        cursor.y -= self.line_height * 1.5

        pdf.drawString(self.margin, cursor.y, f"Dear {personal.first_name.upper()},")
        cursor.y -= self.line_height * 1.5
        self._paragraph(cursor, content.letter_body)
        for paragraph in content.extra_paragraphs:
            cursor.y -= self.line_height * 0.5
            self._paragraph(cursor, paragraph)
        cursor.y -= self.line_height

        self._heading(cursor, content.summary_title)
        self._summary_table(cursor, content.summary_rows)

        if content.result_question:
            self._heading(cursor, content.result_question)
            self._paragraph(cursor, content.result_text, font="Helvetica-Bold", color=COLOR_PRIMARY_DARK)
            cursor.y -= self.line_height

        if content.notice_title:
            self._heading(cursor, content.notice_title, color=COLOR_RED)
            self._paragraph(cursor, content.notice_text)

    def _draw_filing_page(self, cursor: _Cursor, content: InstructionContent):
        self._heading(cursor, content.filing_question)
        self._paragraph(cursor, content.filing_text)
        cursor.y -= self.line_height * 0.5
        if len(content.addresses) > 1:
            self._paragraph(cursor, PRIVATE_DELIVERY_NOTE)
            cursor.y -= self.line_height * 0.5
        self._addresses(cursor, content.addresses)

        if content.closing_question:
            self._heading(cursor, content.closing_question)
            self._paragraph(cursor, content.closing_text)

    def _draw_checklist_page(self, cursor: _Cursor, content: InstructionContent):
        self._heading(cursor, content.checklist_title, size=18, color=COLOR_DARK)
        cursor.y -= self.line_height * 0.5
        for number, step in enumerate(content.checklist, start=1):
            self._ensure_space(cursor, self.line_height * 2)
            cursor.pdf.setFont("Helvetica-Bold", 10)
            cursor.pdf.setFillColor(COLOR_RED)
            cursor.pdf.drawString(self.margin, cursor.y, f"{number}.")
            self._paragraph(cursor, step.text, indent=20)
            cursor.y -= self.line_height * 0.4
            if step.table:
                self._table(cursor, step.table)
            if step.note:
                self._paragraph(cursor, step.note, size=8, color=COLOR_MUTED, indent=20)
            cursor.y -= self.line_height * 0.6

    def _draw_faq_page(self, cursor: _Cursor, content: InstructionContent):
        self._heading(cursor, content.faq_title, size=16, color=COLOR_DARK)
        cursor.y -= self.line_height * 0.5
        for question, answer in content.faq:
            self._ensure_space(cursor, self.line_height * 3)
            self._paragraph(cursor, question, font="Helvetica-Bold", color=COLOR_PRIMARY_DARK)
            self._paragraph(cursor, answer)
            cursor.y -= self.line_height * 0.6


instruction_page_generator = InstructionPageGenerator()
