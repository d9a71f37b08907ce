"""HTTP views for store settings.

``GET`` returns one setting (``?key=``) or all of them, ``PUT`` updates an
existing key and ``POST`` creates a new one.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.responses import ok, validate

from .domain import SettingsStore, serialize
from .schemas import SettingCreateDTO, SettingUpdateDTO


class SettingsView(APIView):
    def get(self, request):
        store = SettingsStore()
        key = request.query_params.get("key")
        if key:
            return Response(ok(serialize(store.get(key))))
        return Response(ok(store.all()))

    def put(self, request):
        dto = validate(SettingUpdateDTO, request.data)
        setting = SettingsStore().set(dto.key, dto.value)
        return Response(ok(serialize(setting), message="Setting updated successfully"))

    def post(self, request):
        dto = validate(SettingCreateDTO, request.data)
        setting = SettingsStore().create(dto.key, dto.value, dto.type, dto.description)
        return Response(
            ok(serialize(setting), message="Setting created successfully"),
            status=status.HTTP_201_CREATED,
        )
