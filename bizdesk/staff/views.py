from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from .filters import StaffMemberFilter
from .models import StaffMember
from .serializers import StaffMemberSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def staff_list_create(request):
    """List the user's staff or add a staff member"""
    if request.method == 'GET':
        filterset = StaffMemberFilter(request.query_params, queryset=StaffMember.objects.filter(owner=request.user))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = StaffMemberSerializer(filterset.qs.order_by('name'), many=True)
        return Response(serializer.data)
    else:
        serializer = StaffMemberSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(owner=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def staff_detail(request, pk):
    """Retrieve, update or delete a staff member"""
    member = get_object_or_404(StaffMember, pk=pk, owner=request.user)

    if request.method == 'GET':
        serializer = StaffMemberSerializer(member)
        return Response(serializer.data)
    elif request.method == 'PUT':
        serializer = StaffMemberSerializer(member, data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    elif request.method == 'PATCH':
        serializer = StaffMemberSerializer(member, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        member.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
