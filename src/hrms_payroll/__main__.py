"""Run the payroll API: ``python -m hrms_payroll`` or ``hrms-payroll``."""

import uvicorn

from hrms_payroll.config import configure_logging, settings


def main() -> None:
    configure_logging()
    uvicorn.run(
        "hrms_payroll.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
