"""
Report document model and template builders

Form payloads from the three report forms are turned into a neutral
ReportDocument that both the PDF and the HTML renderers understand.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from verivault.errors import InvalidReportTypeError

MEDICAL_INCIDENT = 'medical_incident'
NON_MEDICAL_INCIDENT = 'non_medical_incident'
SECURITY_AUDIT = 'security_audit'

REPORT_TYPES = {
    MEDICAL_INCIDENT: 'Medical Incident Report',
    NON_MEDICAL_INCIDENT: 'Non-Medical Incident Report',
    SECURITY_AUDIT: 'Security Systems Audit Report',
}

REPORT_TYPE_ALIASES = {
    'medical': MEDICAL_INCIDENT,
    'incident-medical': MEDICAL_INCIDENT,
    'medical incident report': MEDICAL_INCIDENT,
    'non-medical': NON_MEDICAL_INCIDENT,
    'incident-non-medical': NON_MEDICAL_INCIDENT,
    'non-medical incident report': NON_MEDICAL_INCIDENT,
    'audit': SECURITY_AUDIT,
    'systems-audit': SECURITY_AUDIT,
    'security systems audit report': SECURITY_AUDIT,
}

NOT_PROVIDED = 'N/A'


@dataclass
class Section:
    heading: str
    rows: List[Tuple[str, str]] = field(default_factory=list)
    paragraphs: List[str] = field(default_factory=list)

    def is_empty(self):
        return not self.rows and not self.paragraphs


@dataclass
class ReportDocument:
    title: str
    subtitle: str = 'PIN-Verified Security Report'
    meta: List[Tuple[str, str]] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    body: Optional[str] = None
    verification: Dict[str, Any] = field(default_factory=dict)
    watermark: Optional[str] = None
    attachments: List[Tuple[str, str, int]] = field(default_factory=list)

    def to_text(self):
        """
        Plain-text body for paginated HTML

        Section headings are wrapped in ** so the page formatter turns them
        into headings again.
        """
        blocks = []
        for section in self.sections:
            lines = [f"**{section.heading}**"]
            lines.extend(f"{label}: {value}" for label, value in section.rows)
            lines.extend(section.paragraphs)
            blocks.append('\n'.join(lines))
        if self.body:
            blocks.append(self.body)
        if self.attachments:
            lines = ['**Attachments**']
            lines.extend(f"{name} ({mimetype}, {size} bytes)" for name, mimetype, size in self.attachments)
            blocks.append('\n'.join(lines))
        return '\n\n'.join(blocks)


def normalize_report_type(value) -> Optional[str]:
    """Canonical report type key, or None when the type is not recognised"""
    if not value:
        return None
    key = str(value).strip()
    if key in REPORT_TYPES:
        return key
    return REPORT_TYPE_ALIASES.get(key.lower())


def format_value(value) -> str:
    if value is None or value == '':
        return NOT_PROVIDED
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, (list, tuple)):
        items = [format_value(v) for v in value if v not in (None, '')]
        return ', '.join(items) if items else NOT_PROVIDED
    if isinstance(value, dict):
        items = [f"{k}: {format_value(v)}" for k, v in value.items()]
        return '; '.join(items) if items else NOT_PROVIDED
    return str(value)


def as_dict(value) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value) -> List[Any]:
    return value if isinstance(value, list) else []


def _rows(source, labels):
    source = as_dict(source)
    return [(label, format_value(source.get(key))) for key, label in labels]


def _section(form, key, heading, labels):
    return Section(heading=heading, rows=_rows(form.get(key), labels))


def build_medical_incident_sections(form: Dict[str, Any]) -> List[Section]:
    sections = [
        _section(form, 'injuredPersonInfo', 'Injured Person Information', [
            ('firstName', 'First Name'),
            ('lastName', 'Last Name'),
            ('employeeId', 'Employee ID'),
            ('department', 'Department'),
            ('jobTitle', 'Job Title'),
            ('phone', 'Phone'),
            ('address', 'Address'),
            ('emergencyContact', 'Emergency Contact'),
            ('emergencyPhone', 'Emergency Phone'),
        ]),
        _section(form, 'incidentDetails', 'Incident Details', [
            ('date', 'Date'),
            ('time', 'Time'),
            ('location', 'Location'),
            ('exactLocation', 'Exact Location'),
            ('witnesses', 'Witnesses'),
            ('reportedBy', 'Reported By'),
            ('supervisorNotified', 'Supervisor Notified'),
        ]),
        _section(form, 'injuryDetails', 'Injury Details', [
            ('bodyPart', 'Body Part'),
            ('injuryType', 'Injury Type'),
            ('severity', 'Severity'),
            ('description', 'Description'),
            ('causedBy', 'Caused By'),
            ('activityAtTime', 'Activity at Time of Injury'),
        ]),
        _section(form, 'actionsTaken', 'Actions Taken', [
            ('firstAid', 'First Aid Given'),
            ('medicalAttention', 'Medical Attention'),
            ('hospitalTransport', 'Hospital Transport'),
            ('workRestrictions', 'Work Restrictions'),
            ('description', 'Description'),
            ('treatedBy', 'Treated By'),
            ('facilityName', 'Facility'),
            ('doctorName', 'Doctor'),
        ]),
        _section(form, 'resolution', 'Resolution', [
            ('currentStatus', 'Current Status'),
            ('returnToWork', 'Return to Work'),
            ('expectedReturn', 'Expected Return'),
            ('followUpRequired', 'Follow-up Required'),
            ('workersComp', "Workers' Compensation"),
            ('additionalNotes', 'Additional Notes'),
        ]),
    ]
    return sections


def build_non_medical_incident_sections(form: Dict[str, Any]) -> List[Section]:
    sections = [
        _section(form, 'incidentDetails', 'Incident Details', [
            ('type', 'Incident Type'),
            ('date', 'Date'),
            ('time', 'Time'),
            ('location', 'Location'),
            ('severity', 'Severity'),
            ('reportedBy', 'Reported By'),
            ('description', 'Description'),
        ]),
    ]

    persons = Section(heading='Persons Involved')
    for index, person in enumerate(as_list(form.get('personsInvolved')), start=1):
        if not isinstance(person, dict) or not any(person.values()):
            continue
        persons.rows.append((
            f"Person {index}",
            ', '.join(format_value(person.get(k)) for k in ('name', 'role', 'department', 'involvement', 'contactInfo')),
        ))
    if persons.is_empty():
        persons.paragraphs.append('No persons recorded.')
    sections.append(persons)

    systems = as_dict(form.get('systemsAffected'))
    affected = [name for name in ('security', 'network', 'equipment', 'facility') if systems.get(name)]
    if systems.get('other'):
        affected.append(systems['other'])
    sections.append(Section(heading='Systems Affected', rows=[
        ('Affected', format_value(affected)),
        ('Description', format_value(systems.get('description'))),
    ]))

    sections.append(_section(form, 'correctiveActions', 'Corrective Actions', [
        ('immediateActions', 'Immediate Actions'),
        ('preventiveMeasures', 'Preventive Measures'),
        ('responsiblePerson', 'Responsible Person'),
        ('completionDate', 'Completion Date'),
        ('followUpRequired', 'Follow-up Required'),
        ('additionalNotes', 'Additional Notes'),
    ]))
    sections.append(_section(form, 'investigation', 'Investigation', [
        ('rootCause', 'Root Cause'),
        ('contributingFactors', 'Contributing Factors'),
        ('recommendations', 'Recommendations'),
        ('investigatedBy', 'Investigated By'),
    ]))
    return sections


def _equipment_rows(group: Dict[str, Any], labels):
    """One row per device group; a bare value is shown as given"""
    group = as_dict(group)
    rows = []
    for key, label in labels:
        item = group.get(key)
        if not isinstance(item, dict):
            rows.append((label, format_value(item)))
            continue
        issues = format_value(item.get('issues'))
        rows.append((label, f"{format_value(item.get('operational'))} of {format_value(item.get('count'))} operational; issues: {issues}"))
    return rows


def build_security_audit_sections(form: Dict[str, Any]) -> List[Section]:
    sections = [
        _section(form, 'auditDetails', 'Audit Details', [
            ('date', 'Date'),
            ('time', 'Time'),
            ('auditedBy', 'Audited By'),
            ('auditType', 'Audit Type'),
            ('location', 'Location'),
        ]),
        _section(form, 'cameras', 'Cameras', [
            ('totalCount', 'Total'),
            ('operational', 'Operational'),
            ('issues', 'Issues'),
            ('coverage', 'Coverage'),
            ('recordingQuality', 'Recording Quality'),
            ('storageStatus', 'Storage Status'),
            ('notes', 'Notes'),
        ]),
        _section(form, 'beams', 'Beams', [
            ('totalCount', 'Total'),
            ('operational', 'Operational'),
            ('issues', 'Issues'),
            ('sensitivity', 'Sensitivity'),
            ('coverage', 'Coverage'),
            ('notes', 'Notes'),
        ]),
    ]

    emergency = as_dict(form.get('emergencyEquipment'))
    section = Section(heading='Emergency Equipment', rows=_equipment_rows(emergency, [
        ('alarms', 'Alarms'),
        ('exits', 'Exits'),
        ('lighting', 'Lighting'),
        ('communication', 'Communication'),
    ]))
    section.rows.append(('Notes', format_value(emergency.get('notes'))))
    sections.append(section)

    access = as_dict(form.get('accessControl'))
    section = Section(heading='Access Control', rows=_equipment_rows(access, [
        ('doors', 'Doors'),
        ('cardReaders', 'Card Readers'),
        ('locks', 'Locks'),
    ]))
    section.rows.append(('Notes', format_value(access.get('notes'))))
    sections.append(section)

    sections.append(_section(form, 'otherNotes', 'Other Notes', [
        ('generalObservations', 'General Observations'),
        ('recommendations', 'Recommendations'),
        ('urgentIssues', 'Urgent Issues'),
        ('nextAuditDate', 'Next Audit Date'),
    ]))

    discrepancies = Section(heading='Discrepancies')
    for item in as_list(form.get('discrepancies')):
        if not isinstance(item, dict):
            continue
        flag = ' [FLAGGED]' if item.get('flagged') else ''
        discrepancies.rows.append((
            format_value(item.get('system')),
            f"{format_value(item.get('issue'))} (severity: {format_value(item.get('severity'))}; "
            f"action: {format_value(item.get('action'))}){flag}",
        ))
    if discrepancies.is_empty():
        discrepancies.paragraphs.append('No discrepancies recorded.')
    sections.append(discrepancies)
    return sections


TEMPLATE_BUILDERS: Dict[str, Callable[[Dict[str, Any]], List[Section]]] = {
    MEDICAL_INCIDENT: build_medical_incident_sections,
    NON_MEDICAL_INCIDENT: build_non_medical_incident_sections,
    SECURITY_AUDIT: build_security_audit_sections,
}


def build_sections(report_type: str, form: Dict[str, Any]) -> List[Section]:
    """Dispatch to the template builder for a report type"""
    key = normalize_report_type(report_type)
    if key is None:
        raise InvalidReportTypeError()
    return TEMPLATE_BUILDERS[key](form if isinstance(form, dict) else {})


def flatten_report_data(data: Any) -> str:
    """Free-form report data as text, used for report types without a template"""
    if data is None:
        return ''
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        if isinstance(data.get('content'), str):
            return data['content']
        lines = []
        for key, value in data.items():
            if isinstance(value, dict):
                lines.append(f"**{key}**")
                lines.extend(f"{k}: {format_value(v)}" for k, v in value.items())
            else:
                lines.append(f"{key}: {format_value(value)}")
        return '\n'.join(lines)
    return format_value(data)
