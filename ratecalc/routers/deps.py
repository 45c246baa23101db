from fastapi import Request

from ratecalc.core.config import Settings
from ratecalc.services.calculator import SalaryCalculator


def get_calculator(request: Request) -> SalaryCalculator:
    return request.app.state.calculator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
