"""
Mapper registry, one mapper per fillable document
"""

from typing import Dict

from f1taxmate.models.forms import FormType
from f1taxmate.services.forms.base import FormMapper
from f1taxmate.services.forms.form_1040nr import form_1040nr_mapper
from f1taxmate.services.forms.form_1040nr_schedule_o import form_1040nr_schedule_o_mapper
from f1taxmate.services.forms.form_8316 import form_8316_mapper
from f1taxmate.services.forms.form_843 import form_843_mapper
from f1taxmate.services.forms.form_8843 import form_8843_mapper
from f1taxmate.services.forms.il_1040 import il_1040_mapper
from f1taxmate.services.forms.il_schedule_nr import il_schedule_nr_mapper
from f1taxmate.services.forms.il_schedule_wit import il_schedule_wit_mapper

MAPPERS: Dict[FormType, FormMapper] = {
    FormType.FORM_8843: form_8843_mapper,
    FormType.FORM_1040NR: form_1040nr_mapper,
    FormType.FORM_1040NR_SCHEDULE_O: form_1040nr_schedule_o_mapper,
    FormType.FORM_843: form_843_mapper,
    FormType.FORM_8316: form_8316_mapper,
    FormType.FORM_IL1040: il_1040_mapper,
    FormType.FORM_IL1040_SCHEDULE_NR: il_schedule_nr_mapper,
    FormType.FORM_IL1040_SCHEDULE_IL_WIT: il_schedule_wit_mapper,
}


def get_mapper(form_type: FormType) -> FormMapper:
    return MAPPERS[form_type]
