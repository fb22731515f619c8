from pydantic import BaseModel

from forecaster.models.work_package import WorkPackage


class Project(BaseModel):
    name: str
    work_packages: list[WorkPackage] = []

    @property
    def open_packages(self) -> list[WorkPackage]:
        return [wp for wp in self.work_packages if not wp.is_done]
