from app.crud.base import CRUDBase
from app.models.series import Series
from app.schemas.content import SeriesCreate, SeriesUpdate


class CRUDSeries(CRUDBase[Series, SeriesCreate, SeriesUpdate]):
    pass


series = CRUDSeries(Series)
