"""
Package Assembler

Builds one output PDF per product: instruction pages first, then the filled
templates in a fixed order. Each sub-document is either required (its
failure aborts the package) or optional (its failure degrades to a
placeholder page).
"""

import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, NamedTuple, Optional, Tuple
import structlog

from f1taxmate.core.config import settings
from f1taxmate.core.exceptions import (
    F1TaxMateError,
    FormGenerationError,
    PackageAssemblyError,
    TemplateFieldMissingError,
)
from f1taxmate.models.filing import FormData
from f1taxmate.models.forms import (
    TEMPLATE_PATHS,
    FillReport,
    FormType,
    GeneratedPackage,
    ProductId,
    SubDocumentResult,
)
from f1taxmate.models.tax_result import TaxResult
from f1taxmate.monitoring.metrics import metrics_collector, track_counter, track_timing
from f1taxmate.services.forms.base import FilingContext
from f1taxmate.services.forms.registry import get_mapper
from f1taxmate.services.instruction_pages import InstructionPageGenerator, instruction_page_generator
from f1taxmate.services.pdf_filler import fill_pdf, merge_pdfs, page_count, read_field_namespace
from f1taxmate.services.products import ensure_no_net_underpayment
from f1taxmate.services.template_store import TemplateStore, get_template_store

logger = structlog.get_logger()


@dataclass(frozen=True)
class SubDocument:
    form_type: FormType
    required: bool = True
    placeholder_text: str = ""


@dataclass(frozen=True)
class PackageLayout:
    filename: str
    documents: Tuple[SubDocument, ...]


PACKAGE_LAYOUTS: Dict[ProductId, PackageLayout] = {
    ProductId.FEDERAL: PackageLayout(
        filename="Federal_Tax_Return_{year}.pdf",
        documents=(
            SubDocument(FormType.FORM_1040NR),
            SubDocument(
                FormType.FORM_1040NR_SCHEDULE_O,
                required=False,
                placeholder_text="Form 1040-NR (Schedule O) - To be processed.",
            ),
            SubDocument(FormType.FORM_8843),
        ),
    ),
    ProductId.FORM_8843: PackageLayout(
        filename="Form_8843_{year}.pdf",
        documents=(SubDocument(FormType.FORM_8843),),
    ),
    ProductId.ILLINOIS: PackageLayout(
        filename="Illinois_State_Return_{year}.pdf",
        documents=(
            SubDocument(FormType.FORM_IL1040),
            SubDocument(FormType.FORM_IL1040_SCHEDULE_IL_WIT),
            SubDocument(FormType.FORM_IL1040_SCHEDULE_NR),
        ),
    ),
    ProductId.FICA: PackageLayout(
        filename="FICA_Refund_{year}.pdf",
        documents=(
            SubDocument(FormType.FORM_843),
            SubDocument(FormType.FORM_8316),
        ),
    ),
}


class FilledDocument(NamedTuple):
    content: bytes
    report: FillReport
    page_count: int


class PackageAssembler:
    """Fill, order and merge the documents of one product"""

    def __init__(
        self,
        template_store: Optional[TemplateStore] = None,
        instruction_pages: Optional[InstructionPageGenerator] = None,
        strict_template_fields: Optional[bool] = None,
    ):
        self.template_store = template_store or get_template_store()
        self.instruction_pages = instruction_pages or instruction_page_generator
        if strict_template_fields is None:
            strict_template_fields = settings.STRICT_TEMPLATE_FIELDS
        self.strict_template_fields = strict_template_fields

    async def fill_document(self, form_type: FormType, context: FilingContext) -> FilledDocument:
        """
        Load one template and write the mapped values into it

        Template fetch errors propagate unchanged; anything else that goes
        wrong is a FormGenerationError for this document.
        """
        mapper = get_mapper(form_type)
        template = await self.template_store.load(TEMPLATE_PATHS[form_type])

        try:
            namespace = read_field_namespace(template)
            report = mapper.fill(namespace, context)

            misses = len(report.missing_optional) + len(report.missing_required)
            if misses:
                metrics_collector.increment_counter("template_field_misses", misses)

            if report.missing_required and self.strict_template_fields:
                raise TemplateFieldMissingError(
                    f"{mapper.title}: required template fields missing",
                    document=form_type.value,
                    fields=report.missing_required,
                )

            content = fill_pdf(template, report.values)
            pages = page_count(content)
            metrics_collector.increment_counter("form_fills")
            logger.info("Document filled",
                       form_type=form_type.value,
                       pages=pages,
                       fields=len(report.values))
            return FilledDocument(content=content, report=report, page_count=pages)

        except F1TaxMateError:
            raise
        except Exception as e:
            logger.error("Document fill failed", form_type=form_type.value, error=str(e))
            raise FormGenerationError(
                f"Failed to fill {mapper.title}: {str(e)}", document=form_type.value
            ) from e

    def package_filename(self, product_id: ProductId, tax_year: int) -> str:
        return PACKAGE_LAYOUTS[product_id].filename.format(year=tax_year)

    @track_counter("package_assemblies")
    @track_timing("package_assembly")
    async def assemble(
        self,
        product_id: ProductId,
        form_data: FormData,
        tax_result: TaxResult,
        prepared_on: Optional[date] = None,
    ) -> GeneratedPackage:
        """
        Assemble the package for one product

        Args:
            product_id: Product to build
            form_data: Validated filing data
            tax_result: Computed tax result for the same filing
            prepared_on: Preparation date printed on signature lines (defaults to today)

        Returns:
            Merged PDF with per-document outcomes

        Raises:
            NetUnderpaymentError: payable product while the filer owes net tax
            PackageAssemblyError: a required sub-document failed or has no pages
        """
        ensure_no_net_underpayment(tax_result, product_id)

        context = FilingContext(
            form_data=form_data,
            tax_result=tax_result,
            prepared_on=prepared_on or date.today(),
        )
        layout = PACKAGE_LAYOUTS[product_id]
        logger.info("Assembling package",
                    product=product_id.value,
                    documents=[doc.form_type.value for doc in layout.documents])

        try:
            instructions = await asyncio.to_thread(self.instruction_pages.render, product_id, context)
        except Exception as e:
            logger.error("Instruction pages failed", product=product_id.value, error=str(e))
            raise PackageAssemblyError(
                f"Failed to draw instruction pages: {str(e)}", product=product_id.value
            ) from e

        # Independent sub-documents fill concurrently; each works on its own template copy
        outcomes = await asyncio.gather(
            *(self.fill_document(doc.form_type, context) for doc in layout.documents),
            return_exceptions=True,
        )

        parts: List[bytes] = [instructions]
        results: List[SubDocumentResult] = [
            SubDocumentResult(title="Instructions", page_count=page_count(instructions))
        ]

        for doc, outcome in zip(layout.documents, outcomes):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome

            title = get_mapper(doc.form_type).title
            failure = None
            if isinstance(outcome, Exception):
                failure = outcome
            elif outcome.page_count == 0:
                failure = FormGenerationError(f"{title} has no pages", document=doc.form_type.value)

            if failure is None:
                parts.append(outcome.content)
                results.append(SubDocumentResult(
                    form_type=doc.form_type,
                    title=title,
                    page_count=outcome.page_count,
                    missing_optional=outcome.report.missing_optional,
                    missing_required=outcome.report.missing_required,
                ))
                continue

            if doc.required:
                logger.error("Required document failed",
                            product=product_id.value,
                            form_type=doc.form_type.value,
                            error=str(failure))
                raise PackageAssemblyError(
                    f"{title} could not be produced: {str(failure)}",
                    product=product_id.value,
                    document=doc.form_type.value,
                ) from failure

            logger.warning("Optional document replaced by placeholder",
                          product=product_id.value,
                          form_type=doc.form_type.value,
                          error=str(failure))
            placeholder = self.instruction_pages.placeholder_page(doc.placeholder_text or f"{title} - To be processed.")
            parts.append(placeholder)
            results.append(SubDocumentResult(
                form_type=doc.form_type,
                title=title,
                page_count=page_count(placeholder),
                placeholder=True,
            ))

        try:
            content = merge_pdfs(parts)
        except Exception as e:
            logger.error("Package merge failed", product=product_id.value, error=str(e))
            raise PackageAssemblyError(
                f"Failed to merge package documents: {str(e)}", product=product_id.value
            ) from e

        package = GeneratedPackage(
            product_id=product_id,
            filename=self.package_filename(product_id, context.tax_year),
            content=content,
            page_count=sum(result.page_count for result in results),
            documents=results,
        )
        metrics_collector.record_package(
            product_id.value,
            pages=package.page_count,
            placeholders=sum(1 for result in results if result.placeholder),
        )
        logger.info("Package assembled",
                    product=product_id.value,
                    filename=package.filename,
                    pages=package.page_count)
        return package
