from pydantic import BaseModel, field_validator

PLAN_LIMITS = {
    "monthly": {"companies": 1, "employees": 10, "trial_days": 7},
    "semestral": {"companies": 5, "employees": 50, "trial_days": 7},
    "annual": {"companies": 10, "employees": 100, "trial_days": 7},
}


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email', 'password')
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Email y contraseña son requeridos")
        return v


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str
    selectedPlan: str = "monthly"

    @field_validator('email', 'password', 'name')
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Faltan campos requeridos")
        return v

    @field_validator('selectedPlan')
    @classmethod
    def known_plan(cls, v):
        return v if v in PLAN_LIMITS else "monthly"
