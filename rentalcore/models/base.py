from datetime import datetime


class RecordMixin:
    """Maps wire field names (camelCase) onto column attributes."""

    # api name -> attribute name
    __api_fields__: dict = {}
    __datetime_fields__: tuple = ()

    def serialize(self) -> dict:
        data = {"id": self.id}
        for api_name, attr in self.__api_fields__.items():
            value = getattr(self, attr)
            if hasattr(value, "isoformat"):
                value = value.isoformat()
            data[api_name] = value
        return data

    def apply(self, record: dict) -> None:
        for api_name, attr in self.__api_fields__.items():
            if api_name not in record:
                continue
            value = record[api_name]
            if attr in self.__datetime_fields__ and isinstance(value, str):
                value = datetime.fromisoformat(value)
            setattr(self, attr, value)
