"""
Declarative form mapping

Each document is described by a table of FieldSpec entries (template field
name -> extraction function). FormMapper walks the table against the field
namespace of the loaded template and produces the values to write.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple
import structlog

from f1taxmate.models.filing import FormData
from f1taxmate.models.forms import FieldKind, FieldValue, FillReport, FormType, kind_of
from f1taxmate.models.tax_result import TaxResult
from f1taxmate.services.days_calculator import days_present

logger = structlog.get_logger()


@dataclass(frozen=True)
class FilingContext:
    """Everything a mapper may read; immutable for the duration of a fill"""
    form_data: FormData
    tax_result: TaxResult
    prepared_on: date = field(default_factory=date.today)

    @property
    def tax_year(self) -> int:
        return self.tax_result.tax_year

    @property
    def personal(self):
        return self.form_data.personal_info

    @property
    def university(self):
        return self.form_data.university_info

    @property
    def residency(self):
        return self.form_data.residency_info

    @property
    def income(self):
        return self.form_data.income_info

    def days_in(self, year: int) -> int:
        """Days present in ``year``, with ongoing stays measured up to the preparation date"""
        return days_present(self.residency.visits, year, today=self.prepared_on)


Extractor = Callable[[FilingContext], Optional[FieldValue]]


@dataclass(frozen=True)
class FieldSpec:
    """
    One template field.

    ``extract`` returning None leaves the field untouched. ``required`` marks
    fields whose absence makes the document wrong rather than merely
    incomplete (totals, tax lines). ``alternates`` are tried in order when
    the primary name is not in the template.
    """
    name: str
    extract: Extractor
    required: bool = False
    alternates: Tuple[str, ...] = ()

    @property
    def candidates(self) -> Tuple[str, ...]:
        return (self.name,) + self.alternates


def const(value: FieldValue) -> Extractor:
    """Extractor for a hardcoded answer"""
    return lambda ctx: value


class TemplateNamespace:
    """Field names exposed by a fillable PDF, with their kinds"""

    def __init__(self, fields: Mapping[str, FieldKind]):
        self._fields = dict(fields)

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def kind(self, name: str) -> Optional[FieldKind]:
        return self._fields.get(name)

    @property
    def names(self) -> List[str]:
        return sorted(self._fields)

    def resolve(self, candidates: Iterable[str]) -> Optional[str]:
        for name in candidates:
            if name in self._fields:
                return name
        return None


class FormMapper:
    """Maps filing data onto the fields of one fixed template"""

    def __init__(
        self,
        form_type: FormType,
        title: str,
        fields: List[FieldSpec],
    ):
        self.form_type = form_type
        self.title = title
        self.fields = fields

    def map_values(self, context: FilingContext) -> Dict[str, FieldValue]:
        """Values keyed by primary field name, without consulting a template"""
        values = {}
        for spec in self.fields:
            value = spec.extract(context)
            if value is not None:
                values[spec.name] = value
        return values

    def fill(self, namespace: TemplateNamespace, context: FilingContext) -> FillReport:
        """
        Resolve every mapped value against the template namespace

        Missing fields never raise here: they are logged and reported so the
        caller can decide whether the document is still usable.
        """
        report = FillReport(form_type=self.form_type)

        for spec in self.fields:
            value = spec.extract(context)
            if value is None:
                continue

            target = namespace.resolve(spec.candidates)
            if target is None:
                if spec.required:
                    report.missing_required.append(spec.name)
                    logger.error("Required template field not found",
                                form_type=self.form_type.value,
                                field=spec.name)
                else:
                    report.missing_optional.append(spec.name)
                    logger.warning("Template field not found",
                                  form_type=self.form_type.value,
                                  field=spec.name)
                continue

            expected = kind_of(value)
            actual = namespace.kind(target)
            if actual != expected:
                report.kind_mismatches.append(target)
                if spec.required:
                    report.missing_required.append(spec.name)
                logger.warning("Template field kind mismatch",
                              form_type=self.form_type.value,
                              field=target,
                              expected=expected.value,
                              actual=actual.value if actual else None)
                continue

            report.values[target] = value

        logger.info("Form fields mapped",
                   form_type=self.form_type.value,
                   mapped=len(report.values),
                   missing_optional=len(report.missing_optional),
                   missing_required=len(report.missing_required))
        return report
