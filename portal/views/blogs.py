"""
Blog posts and visitor comments.

Posts are written from the admin panel; anyone may read them and leave
comments.  Lists and details carry the number of comments on each post.
"""
from __future__ import annotations

from django.db.models import Count
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..authentication import PublicReadAuthentication
from ..models import Blog
from ..permissions import IsAdministrator, ReadOnly
from ..serializers.blog import BlogSerializer, CommentSerializer
from ..services import uploads
from ..throttling import PublicWriteThrottle


def _blogs():
    return Blog.objects.annotate(comment_count=Count('comments'))


def _get_blog(pk: int) -> Blog:
    blog = _blogs().filter(pk=pk).first()
    if blog is None:
        raise NotFound('Blog not found')
    return blog


@api_view(['GET', 'POST'])
@authentication_classes([PublicReadAuthentication])
@permission_classes([ReadOnly | IsAdministrator])
def blogs(request):
    if request.method == 'GET':
        return Response(BlogSerializer(_blogs().order_by('created_at', 'id'), many=True).data)

    image = uploads.image_upload(request, 'image')
    s = BlogSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    blog = s.save(image=image) if image else s.save()
    return Response(BlogSerializer(blog).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@authentication_classes([PublicReadAuthentication])
@permission_classes([ReadOnly | IsAdministrator])
def blog_detail(request, pk: int):
    blog = _get_blog(pk)
    if request.method == 'GET':
        return Response(BlogSerializer(blog).data)

    if request.method in ('PUT', 'PATCH'):
        image = uploads.image_upload(request, 'image')
        s = BlogSerializer(blog, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        with uploads.replacing(blog.image, image):
            blog = s.save()
        return Response(BlogSerializer(blog).data)

    # DELETE; comments go with the post
    uploads.discard(blog.image)
    blog.delete()
    return Response({'message': 'Blog deleted successfully'})


@api_view(['GET', 'POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([PublicWriteThrottle])
def blog_comments(request, pk: int):
    blog = Blog.objects.filter(pk=pk).first()
    if blog is None:
        raise NotFound('Blog not found')

    if request.method == 'GET':
        qs = blog.comments.order_by('-created_at', '-id')
        return Response(CommentSerializer(qs, many=True).data)

    s = CommentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    comment = s.save(blog=blog)
    return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)
