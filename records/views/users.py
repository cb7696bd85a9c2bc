"""Staff account views."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import IsStaff
from records.serializers.auth import RegisterSerializer
from records.serializers.user import UserSerializer
from records.services.passwords import PasswordHasher
from records.services.users import UserService
from records.stores import UserStore


def _users() -> UserService:
    return UserService(UserStore(), PasswordHasher())


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaff])
def users(request):
    if request.method == 'POST':
        s = RegisterSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        user = _users().create(vd['username'], vd['password'], vd['role'])
        return Response({'ok': True, 'data': UserSerializer(user).data}, status=status.HTTP_201_CREATED)
    return Response({'ok': True, 'data': UserSerializer(_users().list(), many=True).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaff])
def current_user(request):
    return Response({'ok': True, 'data': UserSerializer(request.user).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaff])
def user_detail(request, user_id: int):
    user = _users().get_by_id(user_id)
    return Response({'ok': True, 'data': UserSerializer(user).data})
