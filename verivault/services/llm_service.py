"""
LLM Analysis Service
Turns raw CSV exports into narrative security reports via an OpenAI-compatible
chat completions API.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from verivault.errors import AIServiceError, MissingFieldError, VeriVaultError
from verivault.utils.timeutil import now_iso

logger = logging.getLogger(__name__)

RULE = '═' * 51

DEFAULT_ANALYSIS_TYPE = 'daily-log'

SYSTEM_PROMPT = (
    "You are a security operations analyst writing reports for a guard "
    "services company. Use clear section headers, plain professional "
    "language and cite concrete figures from the data wherever it has them."
)

ANALYSIS_PROMPTS = {
    'daily-log': """Summarize this data as a Daily Operations Log covering:
- Overview of the shift
- Staff arrivals and departures
- Deliveries and visitors
- Incidents and notable observations
- Equipment condition
- Suggested improvements""",

    'incident-medical': """Review this data for medical incidents and write a Medical Incident Report covering:
- Injuries and medical emergencies
- Response times and first aid given
- Severity of each case
- Required follow-up
- How similar incidents could be avoided""",

    'incident-non-medical': """Review this data for security incidents and write a Security Incident Report covering:
- Breaches, trespassing and suspicious activity
- How staff responded
- Risk level
- Findings of any investigation
- Preventive steps""",

    'annual-security': """Use this data for an Annual Security Assessment covering:
- Overall security posture
- Trends across the period
- Threats and vulnerabilities
- Strategic recommendations
- Budget considerations""",

    'systems-audit': """Use this data for a Security Systems Audit covering:
- Performance of each system
- Failures and malfunctions
- Maintenance needs
- Upgrade recommendations
- Compliance status""",

    'discrepancy': """Review this data for equipment discrepancies covering:
- Each issue found
- Its effect on security operations
- Repair priority
- Likely root cause
- Expected resolution time""",

    'vehicle-inspection': """Review this data for vehicle inspection findings covering:
- Condition of each vehicle
- Safety concerns
- Maintenance needs
- Operational readiness
- Fleet recommendations""",
}


def get_analysis_prompt(report_type: Optional[str]) -> str:
    return ANALYSIS_PROMPTS.get(report_type or DEFAULT_ANALYSIS_TYPE, ANALYSIS_PROMPTS[DEFAULT_ANALYSIS_TYPE])


def build_messages(csv_data: str, client_name: str, report_date: str, report_type: Optional[str]):
    user_prompt = (
        f"CLIENT: {client_name}\n"
        f"DATE: {report_date}\n\n"
        f"{get_analysis_prompt(report_type)}\n\n"
        f"CSV data:\n{csv_data}\n\n"
        "Write the result as a professional security report with clear sections and actionable findings."
    )
    return [
        {'role': 'system', 'content': SYSTEM_PROMPT},
        {'role': 'user', 'content': user_prompt},
    ]


def format_analysis_report(analysis: str, client_name: str, report_date: str) -> str:
    """Wrap the model output with the client/date header and source footer"""
    return (
        f"CLIENT: {client_name}\n"
        f"DATE: {report_date}\n\n"
        f"{RULE}\n"
        "AI-GENERATED SECURITY ANALYSIS:\n"
        f"{RULE}\n\n"
        f"{analysis}\n\n"
        f"{RULE}\n"
        "DATA SOURCE: CSV Analysis\n"
        f"GENERATED: {now_iso()}\n"
        "ANALYSIS ENGINE: VeriVault AI Intelligence\n"
        f"{RULE}"
    )


class LLMAnalysisService:
    """Client for the chat completions endpoint"""

    MAX_TOKENS = 2000
    TEMPERATURE = 0.3

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str,
        model: str = 'gpt-4',
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'LLMAnalysisService':
        return cls(
            api_key=config.get('OPENAI_API_KEY'),
            api_url=config.get('OPENAI_API_URL'),
            model=config.get('OPENAI_MODEL', 'gpt-4'),
            timeout=config.get('OPENAI_TIMEOUT', 60.0),
            transport=config.get('OPENAI_TRANSPORT'),
        )

    def complete(self, messages) -> str:
        """Send a chat completion request and return the message content"""
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.api_url,
                    headers={
                        'Authorization': f'Bearer {self.api_key}',
                        'Content-Type': 'application/json',
                    },
                    json={
                        'model': self.model,
                        'messages': messages,
                        'max_tokens': self.MAX_TOKENS,
                        'temperature': self.TEMPERATURE,
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"LLM request failed: {e}")
            raise AIServiceError() from e

        if response.status_code != 200:
            logger.error(f"LLM API error {response.status_code}: {response.text[:500]}")
            raise AIServiceError()

        try:
            return response.json()['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected LLM response: {e}")
            raise AIServiceError() from e

    def analyze_csv(
        self,
        csv_data: Optional[str],
        client_name: Optional[str] = None,
        report_date: Optional[str] = None,
        report_type: Optional[str] = None,
    ) -> str:
        """
        Analyze CSV data and return the formatted plain-text report

        Raises:
            MissingFieldError: no CSV data
            VeriVaultError: no API key configured (500)
            AIServiceError: the API call failed
        """
        if not csv_data:
            raise MissingFieldError('CSV data is required')
        if not self.api_key:
            logger.error('OpenAI API key not configured')
            raise VeriVaultError('AI service configuration error', status_code=500)

        client_name = client_name or 'Unknown Client'
        report_date = report_date or now_iso()[:10]

        analysis = self.complete(build_messages(csv_data, client_name, report_date, report_type))
        logger.info(f"CSV analysis completed for {client_name} ({report_type or DEFAULT_ANALYSIS_TYPE})")
        return format_analysis_report(analysis, client_name, report_date)
